import pytest
from jose import jwt

from tripmate.core.auth import bearer_token, create_access_token, verify_token
from tripmate.core.errors import AuthenticationError
from tripmate.realtime.auth import extract_token


@pytest.mark.unit
def test_valid_token_yields_identity(settings):
    token = create_access_token(42, settings, role="traveler")
    identity = verify_token(token, settings)
    assert identity.user_id == 42
    assert identity.claims["role"] == "traveler"


@pytest.mark.unit
def test_sub_claim_is_accepted(settings):
    token = jwt.encode({"sub": "15"}, settings.jwt_secret.get_secret_value(), algorithm="HS256")
    assert verify_token(token, settings).user_id == 15


@pytest.mark.unit
@pytest.mark.parametrize("token", [None, "", "abc", "a.b", "a.b.c"])
def test_missing_or_malformed_token(settings, token):
    with pytest.raises(AuthenticationError):
        verify_token(token, settings)


@pytest.mark.unit
def test_expired_token(settings):
    token = create_access_token(1, settings, expires_in=-10)
    with pytest.raises(AuthenticationError, match="expired"):
        verify_token(token, settings)


@pytest.mark.unit
def test_foreign_signature(settings):
    token = jwt.encode({"id": 1}, "someone-else", algorithm="HS256")
    with pytest.raises(AuthenticationError):
        verify_token(token, settings)


@pytest.mark.unit
@pytest.mark.parametrize("claims", [{}, {"id": "abc"}, {"id": True}])
def test_token_without_numeric_user_id(settings, claims):
    token = jwt.encode(claims, settings.jwt_secret.get_secret_value(), algorithm="HS256")
    with pytest.raises(AuthenticationError):
        verify_token(token, settings)


@pytest.mark.unit
def test_bearer_token_parsing():
    assert bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"
    assert bearer_token("Basic xyz") is None
    assert bearer_token("Bearer ") is None
    assert bearer_token(None) is None


@pytest.mark.unit
def test_handshake_header_wins_over_query():
    assert extract_token({"authorization": "Bearer from-header"}, {"token": "from-query"}) == "from-header"
    assert extract_token({}, {"token": "from-query"}) == "from-query"
    assert extract_token({}, {}) is None
