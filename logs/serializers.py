# logs/serializers.py
from rest_framework import serializers
from .models import ActivityLog

class ActivityLogSerializer(serializers.ModelSerializer):
    user_email = serializers.EmailField(source='user.email', read_only=True, default=None)

    class Meta:
        model = ActivityLog
        fields = ['id', 'timestamp', 'user_email', 'note', 'related_model', 'related_id']
