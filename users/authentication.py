# users/authentication.py
import logging

from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication

logger = logging.getLogger(__name__)


class OptionalJWTAuthentication(JWTAuthentication):
    """JWT authentication that answers an expired or invalid token with no principal"""

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except AuthenticationFailed as e:
            logger.info(f"Session check with an unusable token: {e.detail}")
            return None
