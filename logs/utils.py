# logs/utils.py
import logging

from .models import ActivityLog

logger = logging.getLogger(__name__)


def log_activity(user, note, related_model=None, related_id=None):
    logger.info(f"[{user}] {note}")
    return ActivityLog.objects.create(
        user=user,
        note=note,
        related_model=related_model,
        related_id=related_id,
    )
