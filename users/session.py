# users/session.py
"""
Session provider: the only owner of the current principal.

Consumers read ``current_principal`` and ``loading`` and register for
change notifications with ``subscribe``; they never set the principal
themselves.
"""
import logging

from utils.gateway import get_gateway
from .signals import session_changed

logger = logging.getLogger(__name__)


class SessionProvider:

    def __init__(self, gateway=None):
        self.gateway = gateway or get_gateway()
        self.current_principal = None
        self.tokens = None
        self.loading = True
        self._subscribers = []

    @classmethod
    def for_request(cls, request, gateway=None):
        """Provider whose initial session check is the request's own authentication"""
        provider = cls(gateway=gateway)
        user = getattr(request, 'user', None)
        provider.restore(user if user is not None and user.is_authenticated else None)
        return provider

    def restore(self, principal):
        self.loading = False
        self._set_principal(principal, 'restored')
        return principal

    def sign_up(self, email, password):
        principal = self.gateway.auth.sign_up(email, password)
        self.tokens = self.gateway.auth.issue_tokens(principal)
        self.loading = False
        logger.info(f"Signed up {principal.email}")
        self._set_principal(principal, 'signed_up')
        return principal

    def sign_in(self, email, password):
        principal = self.gateway.auth.sign_in(email, password)
        self.tokens = self.gateway.auth.issue_tokens(principal)
        self.loading = False
        logger.info(f"Signed in {principal.email}")
        self._set_principal(principal, 'signed_in')
        return principal

    def sign_out(self, refresh_token=None):
        principal = self.current_principal
        if refresh_token:
            self.gateway.auth.sign_out(refresh_token, principal=principal)
        self.tokens = None
        if principal is not None:
            logger.info(f"Signed out {principal.email}")
        self._set_principal(None, 'signed_out', previous=principal)

    @property
    def is_authenticated(self):
        return self.current_principal is not None

    def subscribe(self, callback):
        """
        Call ``callback(principal=..., event=...)`` after every change made
        by this provider. Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _set_principal(self, principal, event, previous=None):
        self.current_principal = principal
        for callback in list(self._subscribers):
            callback(principal=principal, event=event)
        session_changed.send(
            sender=self,
            principal=principal,
            previous=previous,
            event=event,
        )
