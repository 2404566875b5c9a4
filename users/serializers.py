from rest_framework import serializers
from .models import CustomUser


class CredentialsSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)


class SignOutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)


class PrincipalSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = ['id', 'email']
