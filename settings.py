"""Fixed endpoint and protocol constants for the Microsoft -> Minecraft auth chain

User-tunable values (client id, redirect URI, cache file, timeouts) live in
config.loader.Settings and are passed explicitly to the components.
"""

# Microsoft identity platform (hardcoded - not user configurable)
MS_AUTHORIZE_URL = "https://login.live.com/oauth20_authorize.srf"
MS_TOKEN_URL = "https://login.live.com/oauth20_token.srf"
MS_SCOPE = "XboxLive.signin offline_access"
MS_COBRAND_ID = "8058f65d-ce06-4c30-9559-473c9275a65d"
MS_PROMPT = "select_account"

# Xbox Live
XBOX_LIVE_AUTH_URL = "https://user.auth.xboxlive.com/user/authenticate"
XBOX_LIVE_SITE_NAME = "user.auth.xboxlive.com"
XBOX_LIVE_RELYING_PARTY = "http://auth.xboxlive.com"

# XSTS
XSTS_AUTHORIZE_URL = "https://xsts.auth.xboxlive.com/xsts/authorize"
XSTS_SANDBOX_ID = "RETAIL"
XSTS_RELYING_PARTY = "rp://api.minecraftservices.com/"

# Minecraft services
MINECRAFT_LOGIN_URL = "https://api.minecraftservices.com/authentication/login_with_xbox"
MINECRAFT_PROFILE_URL = "https://api.minecraftservices.com/minecraft/profile"

# Defaults used when no explicit value is configured
DEFAULT_AUTH_CACHE_FILENAME = "msa-auth.json"
DEFAULT_CALLBACK_TIMEOUT = 300.0
DEFAULT_REQUEST_TIMEOUT = 60.0

# Instance storage
INSTANCE_FILENAME = "instance.json"
