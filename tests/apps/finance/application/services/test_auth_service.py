import pytest

from apps.finance.application.services.auth import AuthService
from apps.finance.domain.exceptions import ConflictError, UnauthorizedError, ValidationError
from apps.finance.infrastructure.persistence.models import User
from apps.finance.infrastructure.security.tokens import TokenService


@pytest.mark.django_db
class TestAuthService:
    """Tests for AuthService."""

    def test_register_stores_hashed_password(self, uow):
        user_id = AuthService(uow).register({"username": "carol", "password": "Secret1"})

        user = User.objects.get(id=user_id)
        assert user.username == "carol"
        assert user.password_hash != "Secret1"

    def test_register_duplicate_username_conflicts(self, uow, user):
        """Test registering an existing username raises ConflictError."""
        with pytest.raises(ConflictError):
            AuthService(uow).register({"username": "alice", "password": "Secret1"})

    def test_register_race_on_username_conflicts(self, uow, user, mocker):
        """Test the unique constraint still yields ConflictError when the existence check is passed."""
        mocker.patch(
            "apps.finance.infrastructure.persistence.repositories.UserRepository.is_username_taken",
            return_value=False,
        )

        with pytest.raises(ConflictError):
            AuthService(uow).register({"username": "alice", "password": "Secret1"})

        assert User.objects.filter(username="alice").count() == 1

    def test_register_validates(self, uow):
        with pytest.raises(ValidationError) as exc_info:
            AuthService(uow).register({"username": "carol", "password": "short"})

        assert "password" in exc_info.value.errors
        assert not User.objects.filter(username="carol").exists()

    def test_login_returns_token_for_user(self, uow, user):
        token = AuthService(uow).login({"username": "alice", "password": "Secret1"})

        assert TokenService().validate_token(token) == user.id

    @pytest.mark.parametrize(
        "username, password",
        [("alice", "Wrong1"), ("nobody", "Secret1")],
    )
    def test_login_failures_share_one_message(self, uow, user, username, password):
        with pytest.raises(UnauthorizedError) as exc_info:
            AuthService(uow).login({"username": username, "password": password})

        assert exc_info.value.detail == "Invalid username or password"

    def test_login_deleted_user_rejected(self, uow, user):
        user.is_deleted = True
        user.save()

        with pytest.raises(UnauthorizedError) as exc_info:
            AuthService(uow).login({"username": "alice", "password": "Secret1"})

        assert exc_info.value.detail == "Invalid username or password"
