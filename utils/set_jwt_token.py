from django.conf import settings

ACCESS_COOKIE = 'access_token'
REFRESH_COOKIE = 'refresh_token'


def set_secure_jwt_cookie(response, access_token, refresh_token):
    """
    Stores the access and refresh JWTs in HTTP-only cookies whose lifetime
    matches the token lifetime configured in SIMPLE_JWT.
    """
    lifetimes = {
        ACCESS_COOKIE: (access_token, settings.SIMPLE_JWT['ACCESS_TOKEN_LIFETIME']),
        REFRESH_COOKIE: (refresh_token, settings.SIMPLE_JWT['REFRESH_TOKEN_LIFETIME']),
    }
    for key, (value, lifetime) in lifetimes.items():
        response.set_cookie(
            key=key,
            value=value,
            httponly=True,
            secure=not settings.DEBUG,
            samesite='Lax',
            max_age=int(lifetime.total_seconds())
        )


def clear_jwt_cookies(response):
    response.delete_cookie(ACCESS_COOKIE, samesite='Lax')
    response.delete_cookie(REFRESH_COOKIE, samesite='Lax')
