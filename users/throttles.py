from rest_framework.throttling import SimpleRateThrottle
from django.core.cache import cache


class IPRateThrottle(SimpleRateThrottle):
    """
    Fixed-window counter per client IP, shared by every endpoint.

    The client IP comes from `X-Forwarded-For` when present (see
    `NUM_PROXIES` in the DRF settings), otherwise from `REMOTE_ADDR`.
    """
    scope = 'ip'
    cache = cache

    def get_cache_key(self, request, view):
        return self.cache_format % {'scope': self.scope, 'ident': self.get_ident(request)}


class LoginRateThrottle(SimpleRateThrottle):
    scope = 'anon'
    cache = cache  # Ensures that it uses Redis or a centralized cache backend

    def get_cache_key(self, request, view):
        if request.method != 'POST':
            return None
        ident = request.data.get('email', None)
        if ident:
            ident = ident.lower()
        else:
            ident = self.get_ident(request)
        return self.cache_format % {'scope': self.scope, 'ident': ident}
