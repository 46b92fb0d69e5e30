import base64
import hashlib

import pytest

from msauth.pkce import VERIFIER_ALPHABET, generate_code_challenge, generate_code_verifier, generate_pkce


def test_rfc7636_vector():
    # Appendix B of RFC 7636
    verifier = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"
    assert generate_code_challenge(verifier) == "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"


def test_verifier_shape():
    verifier = generate_code_verifier()
    assert len(verifier) == 128
    assert set(verifier) <= set(VERIFIER_ALPHABET)


def test_verifiers_are_fresh():
    assert generate_code_verifier() != generate_code_verifier()


@pytest.mark.parametrize("length", [42, 129])
def test_verifier_length_bounds(length):
    with pytest.raises(ValueError):
        generate_code_verifier(length)


def test_pair_challenge_matches_verifier():
    pair = generate_pkce()
    digest = hashlib.sha256(pair.verifier.encode("ascii")).digest()

    assert "=" not in pair.challenge
    assert base64.urlsafe_b64decode(pair.challenge + "=") == digest
