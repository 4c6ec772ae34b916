from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework_simplejwt.tokens import AccessToken
from rest_framework_simplejwt.exceptions import TokenError, AuthenticationFailed
from django.core.exceptions import ObjectDoesNotExist
import logging
from .models import User


logger = logging.getLogger("django")

TOKEN_EXPIRED = {"code": "token_expired", "message": "Access token expired. Please refresh your session."}
INVALID_TOKEN = {"code": "invalid_token", "message": "Invalid or expired token. Please log in again."}


class JWTAuthentication(BaseAuthentication):
    """
    JWT authentication reading the access token from the HTTP-only
    `access_token` cookie, or from an `Authorization: Bearer <token>` header.

    Requests carrying no token at all stay anonymous so that public
    endpoints keep working; permission classes decide what anonymous
    users may do.
    """
    keyword = 'Bearer'

    def authenticate(self, request):
        access_token = self.get_raw_token(request)

        if not access_token:
            return None

        try:
            # Decode the access token
            token = AccessToken(access_token)
            user_id = token.get("user_id")

            if not user_id:
                raise AuthenticationFailed(detail=TOKEN_EXPIRED)

            # Fetch user from database
            try:
                user = User.objects.get(id=user_id)
            except ObjectDoesNotExist:
                raise AuthenticationFailed(detail=INVALID_TOKEN)

            if not user.is_active:
                raise AuthenticationFailed(detail=INVALID_TOKEN)

            return (user, token)

        except TokenError:
            logger.debug("Access token expired.")
            raise AuthenticationFailed(detail=TOKEN_EXPIRED)

    def get_raw_token(self, request):
        cookie_token = request.COOKIES.get("access_token")
        if cookie_token:
            return cookie_token

        header = get_authorization_header(request).split()
        if not header or header[0].decode().lower() != self.keyword.lower():
            return None

        if len(header) != 2:
            raise AuthenticationFailed(
                detail={"code": "invalid_header", "message": "Invalid authorization format. Use 'Bearer [token]'."}
            )
        return header[1].decode()

    def authenticate_header(self, request):
        return self.keyword
