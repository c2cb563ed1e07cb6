"""
Unit tests for the activation token issuer.
"""
from datetime import timedelta

import pytest
from jose import JWTError

from core.infrastructure.tokens import JoseTokenIssuer


class TestJoseTokenIssuer:
    """Tests for JoseTokenIssuer."""

    def test_sign_and_decode(self):
        issuer = JoseTokenIssuer(secret="secret")

        token = issuer.sign({"license_id": 7, "hardware_id": "HW-1"}, ttl=timedelta(days=1))
        claims = issuer.decode(token)

        assert claims["license_id"] == 7
        assert claims["hardware_id"] == "HW-1"
        assert claims["exp"] - claims["iat"] == 86400

    def test_other_secret_rejected(self):
        token = JoseTokenIssuer(secret="secret").sign({"license_id": 7}, ttl=timedelta(days=1))

        with pytest.raises(JWTError):
            JoseTokenIssuer(secret="other").decode(token)

    def test_expired_token_rejected(self):
        issuer = JoseTokenIssuer(secret="secret")
        token = issuer.sign({"license_id": 7}, ttl=timedelta(seconds=-10))

        with pytest.raises(JWTError):
            issuer.decode(token)

    def test_secret_from_settings(self, settings):
        settings.LICENSE_TOKEN_SECRET = "configured"

        assert JoseTokenIssuer().secret == "configured"
        assert JoseTokenIssuer().algorithm == "HS256"
