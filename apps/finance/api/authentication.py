from rest_framework import authentication, exceptions

from apps.finance.domain.models import UserContext
from apps.finance.infrastructure.persistence.models import User
from apps.finance.infrastructure.security.tokens import TokenService

KEYWORD = "Bearer"


class BearerTokenAuthentication(authentication.BaseAuthentication):
    """
    `Authorization: Bearer <jwt>`.

    The token's subject must name a non-deleted user. On success
    `request.auth` is the caller's UserContext.
    """

    def __init__(self, token_service: TokenService | None = None):
        self.token_service = token_service or TokenService()

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()

        if not header or header[0].lower() != KEYWORD.lower().encode():
            return None

        if len(header) != 2:
            raise exceptions.AuthenticationFailed("Invalid Authorization header.")

        try:
            token = header[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed("Invalid token header.")

        user_id = self.token_service.validate_token(token)
        if user_id is None:
            raise exceptions.AuthenticationFailed("Invalid or expired token.")

        user = User.objects.filter(id=user_id).first()
        if user is None:
            raise exceptions.AuthenticationFailed("User no longer exists.")

        return user, UserContext(user_id=user.id, username=user.username)

    def authenticate_header(self, request):
        return KEYWORD
