from django.contrib.auth.hashers import check_password, make_password


class PasswordHasher:
    """Thin adapter over Django's configured PASSWORD_HASHERS."""

    def hash_password(self, password: str) -> str:
        return make_password(password)

    def verify_password(self, password: str, password_hash: str) -> bool:
        if not password_hash:
            return False
        return check_password(password, password_hash)
