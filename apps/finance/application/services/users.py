import logging
from typing import List
from uuid import UUID

from apps.finance.application.dto import UserDTO
from apps.finance.application.validators import ChangePasswordValidator, UserUpdateValidator, validate_payload
from apps.finance.domain.exceptions import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from apps.finance.domain.models import UserContext
from apps.finance.infrastructure.persistence.unit_of_work import UnitOfWork
from apps.finance.infrastructure.security.passwords import PasswordHasher

logger = logging.getLogger(__name__)


class UserService:

    def __init__(self, uow: UnitOfWork, password_hasher: PasswordHasher | None = None):
        self.uow = uow
        self.password_hasher = password_hasher or PasswordHasher()

    def get_user(self, user_id: UUID) -> UserDTO:
        user = self.uow.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User with id {user_id} was not found")
        return UserDTO.from_model(user)

    def list_users(self) -> List[UserDTO]:
        return [UserDTO.from_model(user) for user in self.uow.users.get_all()]

    def update_user(self, ctx: UserContext, user_id: UUID, payload: dict) -> None:
        user = self._get_own_user(ctx, user_id)
        data = validate_payload(UserUpdateValidator, payload)
        username = data["username"]

        if self.uow.users.is_username_taken(username, exclude_user_id=user.id):
            raise ConflictError(f"Username '{username}' is already taken")

        user.username = username
        self.uow.users.update(user)
        self.uow.save_changes()
        logger.info("User with id %s updated", user.id)

    def delete_user(self, ctx: UserContext, user_id: UUID) -> None:
        user = self._get_own_user(ctx, user_id)

        self.uow.users.soft_delete(user)
        self.uow.save_changes()
        logger.info("User with id %s deleted", user.id)

    def change_password(self, ctx: UserContext, payload: dict) -> None:
        if ctx is None:
            raise UnauthorizedError("User is not authenticated")

        user = self.uow.users.get_by_id(ctx.user_id)
        if user is None:
            raise NotFoundError("User not found")

        data = validate_payload(ChangePasswordValidator, payload)

        if not self.password_hasher.verify_password(data["current_password"], user.password_hash):
            raise ValidationError.for_field("current_password", "Current password is incorrect")

        user.password_hash = self.password_hasher.hash_password(data["new_password"])
        self.uow.users.update(user)
        self.uow.save_changes()
        logger.info("Password changed for user with id %s", user.id)

    def _get_own_user(self, ctx: UserContext, user_id: UUID):
        # Other users' records are reported as missing rather than forbidden.
        if ctx is None or ctx.user_id != user_id:
            raise NotFoundError(f"User with id {user_id} was not found")

        user = self.uow.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User with id {user_id} was not found")
        return user
