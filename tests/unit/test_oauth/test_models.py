"""Tests for OAuth data models"""
import pytest

from x_oauth.models import TokenPair


@pytest.mark.unit
class TestTokenPairFromResponse:
    """Test suite for TokenPair.from_token_response"""

    @pytest.mark.parametrize("raw,expected", [
        (7200, 7200),
        ("7200", 7200),
        (None, None),
        ("soon", None),
        ([7200], None),
        (True, None),
    ])
    def test_expires_in(self, raw, expected):
        tokens = TokenPair.from_token_response({"access_token": "a", "expires_in": raw})

        assert tokens.expires_in == expected

    def test_keeps_previous_refresh_token(self):
        tokens = TokenPair.from_token_response({"access_token": "a"}, previous_refresh_token="r")

        assert tokens.refresh_token == "r"

    def test_missing_access_token(self):
        with pytest.raises(KeyError):
            TokenPair.from_token_response({"expires_in": 7200})
