"""Errors raised by the instance store"""


class InstanceError(Exception):
    """Base class for instance store failures"""


class InstanceNotFoundError(InstanceError, KeyError):
    """No registered instance matches the lookup"""

    def __init__(self, key):
        super().__init__(f"No instance found for {key!r}")
        self.key = key

    def __str__(self) -> str:
        return self.args[0]
