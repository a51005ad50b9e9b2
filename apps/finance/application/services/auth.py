import logging
from uuid import UUID

from apps.finance.application.validators import LoginValidator, RegisterValidator, validate_payload
from apps.finance.domain.exceptions import ConflictError, UnauthorizedError
from apps.finance.infrastructure.persistence.models import User
from apps.finance.infrastructure.persistence.unit_of_work import UnitOfWork
from apps.finance.infrastructure.security.passwords import PasswordHasher
from apps.finance.infrastructure.security.tokens import TokenService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


class AuthService:
    """Registration and credential exchange for bearer tokens."""

    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: PasswordHasher | None = None,
        token_service: TokenService | None = None,
    ):
        self.uow = uow
        self.password_hasher = password_hasher or PasswordHasher()
        self.token_service = token_service or TokenService()

    def register(self, payload: dict) -> UUID:
        data = validate_payload(RegisterValidator, payload)
        username = data["username"]

        if self.uow.users.is_username_taken(username):
            raise ConflictError(f"Username '{username}' is already taken")

        user = User(
            username=username,
            password_hash=self.password_hasher.hash_password(data["password"]),
        )
        self.uow.users.add(user)
        self.uow.save_changes()

        logger.info("User registered successfully: %s", username)
        return user.id

    def login(self, payload: dict) -> str:
        """
        Exchange credentials for a signed token.

        Unknown user, deleted user and wrong password all fail with the
        same message.
        """
        data = validate_payload(LoginValidator, payload)

        user = self.uow.users.get_by_username(data["username"])
        if user is None or not self.password_hasher.verify_password(data["password"], user.password_hash):
            logger.warning("Login failed: invalid credentials")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        logger.info("Login succeeded: %s", user.id)
        return self.token_service.generate_token(user.id, user.username)
