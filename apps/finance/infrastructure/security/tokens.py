"""
Bearer token issue/validation (HS256 JWT).
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone

import jwt
from django.conf import settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class TokenService:

    def __init__(
        self,
        secret_key: str | None = None,
        issuer: str | None = None,
        audience: str | None = None,
        expiration_hours: float | None = None,
    ):
        self.secret_key = secret_key or settings.JWT_SECRET_KEY
        self.issuer = issuer or settings.JWT_ISSUER
        self.audience = audience or settings.JWT_AUDIENCE
        self.expiration_hours = expiration_hours if expiration_hours is not None else settings.JWT_EXPIRATION_HOURS

    def generate_token(self, user_id: uuid.UUID, username: str) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "name": username,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now,
            "exp": now + timedelta(hours=self.expiration_hours),
        }
        return jwt.encode(claims, self.secret_key, algorithm=ALGORITHM)

    def validate_token(self, token: str) -> uuid.UUID | None:
        """
        Verify signature, issuer, audience and expiry.

        Returns:
            The user id from the `sub` claim, or None if the token is invalid
        """
        if not token:
            return None

        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[ALGORITHM],
                issuer=self.issuer,
                audience=self.audience,
                options={"require": ["sub", "exp", "iss", "aud"]},
            )
            return uuid.UUID(claims["sub"])
        except jwt.PyJWTError as e:
            logger.info("Rejected bearer token: %s", e)
            return None
        except ValueError:
            logger.info("Rejected bearer token: malformed subject claim")
            return None
