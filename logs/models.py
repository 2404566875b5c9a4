# logs/models.py
from django.db import models
from django.conf import settings


class ActivityLog(models.Model):
    """Audit trail of one principal: session events, items added, enquiries received"""
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='activity_logs'
    )
    note = models.TextField()
    timestamp = models.DateTimeField(auto_now_add=True)

    # 'CustomUser', 'Item' or 'Enquiry' with the id of that record
    related_model = models.CharField(max_length=100, blank=True, null=True)
    related_id = models.CharField(max_length=100, blank=True, null=True)

    class Meta:
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['related_model', 'related_id'], name='activity_related_idx'),
        ]

    def __str__(self):
        who = self.user.email if self.user else 'deleted user'
        return f"{who}: {self.note[:40]} ({self.timestamp:%Y-%m-%d %H:%M})"
