import logging

from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.permissions import AllowAny, IsAuthenticated

from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.exceptions import TokenError

from drf_spectacular.utils import extend_schema

from .serializers import RegisterSerializer, LoginUserSerializer, ProfileSerializer
from .throttles import LoginRateThrottle
from utils import set_jwt_token
from utils.tokens import generate_tokens_for_user

logger = logging.getLogger("rest_framework")


class RegisterView(generics.CreateAPIView):
    """
    RegisterView

    Registers a new reviewer (`user_type=user`) or brand (`user_type=brand`)
    account. Upon successful registration, JWT access and refresh tokens are
    issued as secure cookies and returned in the body for Bearer clients.

    **Request Body Parameters:**
      - **username (str)**
      - **email (str)**
      - **password (str)**
      - **user_type (str, optional):** `user` (default) or `brand`
      - **bio, phone, website (str, optional)**

    **Responses:**
      - **201 Created:** User registration successful.
      - **400 Bad Request:** Validation errors (e.g. email already taken).
    """

    serializer_class = RegisterSerializer
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = self.serializer_class(data=request.data)
        if serializer.is_valid():
            user = serializer.save()
            access_token, refresh_token = generate_tokens_for_user(user)

            logger.info(f"User {user.email} registered successfully.")

            response = Response({
                'message': 'User registered successfully.',
                'user': ProfileSerializer(user).data,
                'access': access_token,
                'refresh': refresh_token,
            }, status=status.HTTP_201_CREATED)

            set_jwt_token.set_secure_jwt_cookie(response, access_token, refresh_token)

            return response

        logger.warning(f"Registration failed for email {request.data.get('email')}: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class LoginUser(APIView):
    """
    LoginUser

    Authenticates a user using email and password credentials. On successful
    authentication, issues JWT tokens as secure cookies and in the body.

    **Responses:**
      - **200 OK:** Login successful with JWT tokens issued.
      - **400 Bad Request:** Invalid credentials or validation errors.
    """

    permission_classes = [AllowAny]
    serializer_class = LoginUserSerializer
    throttle_classes = [LoginRateThrottle]

    def post(self, request):
        serializer = self.serializer_class(data=request.data)
        if serializer.is_valid():
            user = serializer.validated_data['user']
            access_token, refresh_token = generate_tokens_for_user(user)

            logger.info(f"User {user.email} logged in successfully.")

            response = Response({
                'message': 'Login successful',
                'user_type': user.user_type,
                'access': access_token,
                'refresh': refresh_token,
            }, status=status.HTTP_200_OK)

            set_jwt_token.set_secure_jwt_cookie(response, access_token, refresh_token)

            return response

        logger.warning(f"Login failed for email {request.data.get('email')}: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class LogoutUser(APIView):
    """
    LogoutUser

    Logs out the current user by blacklisting the refresh token (cookie or
    `refresh` body field) and removing the JWT cookies.
    """

    serializer_class = None
    permission_classes = [AllowAny]

    def post(self, request):
        response = Response(
            {"message": "Logout successful"},
            status=status.HTTP_200_OK,
        )

        refresh_token = request.COOKIES.get("refresh_token") or request.data.get("refresh")
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError as e:
                logger.warning(f"Logout failed: {e}")
                response.data = {
                    "error": "Invalid token or token already blacklisted.",
                    "details": str(e)
                }
                response.status_code = status.HTTP_400_BAD_REQUEST

        set_jwt_token.clear_jwt_cookies(response)

        return response


class RefreshAccessTokenView(APIView):
    """
    RefreshAccessTokenView

    Refreshes the JWT access token using the refresh token stored in cookies
    (or sent as `refresh` in the body). The used refresh token is blacklisted
    and a rotated pair is issued.

    **Responses:**
      - **200 OK:** New tokens issued.
      - **401 Unauthorized:** If the refresh token is missing, invalid, or expired.
    """

    permission_classes = [AllowAny]
    serializer_class = None

    def post(self, request):
        refresh_token = request.COOKIES.get("refresh_token") or request.data.get("refresh")
        if not refresh_token:
            logger.info("Refresh token not provided.")
            return Response(
                {"message": "Invalid or expired token. Please log in again."},
                status=status.HTTP_401_UNAUTHORIZED
            )

        try:
            refresh = RefreshToken(refresh_token)
            # Blacklist the used token before rotating it
            refresh.blacklist()
        except TokenError as e:
            logger.info("Invalid or expired refresh token: %s", e)
            return Response(
                {"message": "Invalid or expired token. Please log in again."},
                status=status.HTTP_401_UNAUTHORIZED
            )

        refresh.set_jti()
        refresh.set_exp()
        refresh.set_iat()

        new_access_token = str(refresh.access_token)
        new_refresh_token = str(refresh)

        response = Response(
            {"message": "Access token refreshed", "access": new_access_token, "refresh": new_refresh_token},
            status=status.HTTP_200_OK
        )

        set_jwt_token.set_secure_jwt_cookie(response, new_access_token, new_refresh_token)
        return response


@extend_schema(tags=['Profile'], description="Retrieve or update the current user's profile.")
class ProfileView(generics.RetrieveUpdateAPIView):
    serializer_class = ProfileSerializer
    permission_classes = [IsAuthenticated]

    def get_object(self):
        return self.request.user
