"""
JWT authentication that also binds the user to the logging context.
"""
from rest_framework_simplejwt.authentication import JWTAuthentication

from apps.core.observability.correlation import bind_user


class CorrelatedJWTAuthentication(JWTAuthentication):
    """
    SimpleJWT bearer authentication.

    Once a token resolves to a user, its id and role are attached to the
    request correlation context so every log line carries them.
    """

    def authenticate(self, request):
        result = super().authenticate(request)
        if result is not None:
            bind_user(result[0])
        return result
