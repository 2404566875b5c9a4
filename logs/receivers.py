# logs/receivers.py
from django.dispatch import receiver

from users.signals import session_changed
from .utils import log_activity

SESSION_NOTES = {
    'signed_up': "Account created",
    'signed_in': "Signed in",
    'signed_out': "Signed out",
}


@receiver(session_changed)
def record_session_change(sender, principal, event, previous=None, **kwargs):
    note = SESSION_NOTES.get(event)
    user = principal or previous
    if note is None or user is None:
        return
    log_activity(user=user, note=note, related_model='CustomUser', related_id=str(user.id))
