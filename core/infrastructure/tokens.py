"""
Signed token issuer.

Activation hands the device a long-lived signed token. This service
only issues tokens; verification belongs to whoever consumes them.
"""
import logging
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Dict, Optional

from django.conf import settings
from django.utils import timezone
from jose import jwt

logger = logging.getLogger(__name__)


class TokenIssuer(ABC):
    """Port for minting signed tokens."""

    @abstractmethod
    def sign(self, payload: Dict[str, Any], ttl: timedelta) -> str:
        """
        Sign a payload.

        Args:
            payload: Claims to embed
            ttl: Lifetime of the token

        Returns:
            Encoded token string
        """
        pass


class JoseTokenIssuer(TokenIssuer):
    """HMAC-signed JWTs via python-jose."""

    def __init__(self, secret: Optional[str] = None, algorithm: Optional[str] = None):
        self.secret = secret or getattr(settings, "LICENSE_TOKEN_SECRET", None) or settings.SECRET_KEY
        self.algorithm = algorithm or getattr(settings, "LICENSE_TOKEN_ALGORITHM", "HS256")

    def sign(self, payload: Dict[str, Any], ttl: timedelta) -> str:
        issued_at = timezone.now()
        claims = dict(payload)
        claims.update({"iat": issued_at, "exp": issued_at + ttl})
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """Decode and verify a token issued by this issuer."""
        return jwt.decode(token, self.secret, algorithms=[self.algorithm])
