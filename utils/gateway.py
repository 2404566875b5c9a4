# utils/gateway.py
"""
One handle over the three backend capabilities the app depends on:
authentication, object storage for item images and table access.

Views, workflows and view-models never talk to the ORM, the storage
backend or the token machinery directly; they go through a
``RemoteDataGateway`` so every remote failure is translated into the
error taxonomy in ``utils.exceptions``.
"""
import logging

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.files.storage import storages
from django.db import DatabaseError, transaction
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from .exceptions import AuthError, FetchError, InsertError, UploadError

logger = logging.getLogger(__name__)


class AuthGateway:

    def sign_up(self, email, password):
        User = get_user_model()
        email = User.objects.normalize_email((email or '').strip())
        if not email or not password:
            raise AuthError('Email and password are required')
        if User.objects.filter(email__iexact=email).exists():
            raise AuthError('User already registered')
        try:
            validate_password(password)
        except DjangoValidationError as e:
            raise AuthError(' '.join(e.messages)) from e
        try:
            with transaction.atomic():
                return User.objects.create_user(username=email, email=email, password=password)
        except DatabaseError as e:
            logger.error(f"Sign-up failed for {email}: {e}")
            raise AuthError(str(e)) from e

    def sign_in(self, email, password):
        User = get_user_model()
        email = User.objects.normalize_email((email or '').strip())
        user = authenticate(username=email, password=password)
        if user is None:
            raise AuthError('Invalid login credentials')
        return user

    def issue_tokens(self, user):
        refresh = RefreshToken.for_user(user)
        return {
            'access': str(refresh.access_token),
            'refresh': str(refresh),
        }

    def sign_out(self, refresh_token, principal=None):
        try:
            token = RefreshToken(refresh_token)
        except TokenError as e:
            raise AuthError(str(e)) from e
        if principal is not None and str(token.get('user_id')) != str(principal.id):
            raise AuthError('Token does not belong to this session')
        token.blacklist()


class StorageGateway:

    def __init__(self, alias='item_images'):
        self.alias = alias

    @property
    def storage(self):
        return storages[self.alias]

    def upload(self, path, content):
        """Store ``content`` at ``path`` and return the stored name"""
        try:
            name = self.storage.save(path, content)
        except Exception as e:
            logger.error(f"Upload failed for {path}: {e}")
            raise UploadError(str(e) or e.__class__.__name__) from e
        logger.info(f"Uploaded {name}")
        return name

    def get_public_url(self, name):
        url = self.storage.url(name)
        if url.startswith('/'):
            return f"{settings.SITE_URL}{url}"
        return url

    def delete(self, name):
        self.storage.delete(name)
        logger.info(f"Deleted {name}")

    def list(self, prefix=''):
        """Every stored name below ``prefix``, depth first"""
        try:
            directories, files = self.storage.listdir(prefix)
        except FileNotFoundError:
            return []
        base = f"{prefix.rstrip('/')}/" if prefix else ''
        names = [f"{base}{f}" for f in files]
        for directory in directories:
            names.extend(self.list(f"{base}{directory}"))
        return names


class TableGateway:

    def insert(self, model, **record):
        try:
            with transaction.atomic():
                return model.objects.create(**record)
        except DatabaseError as e:
            logger.error(f"Insert into {model.__name__} failed: {e}")
            raise InsertError(str(e)) from e

    def select(self, model, order_by=('-created_at',), related=(), **filters):
        try:
            queryset = model.objects.filter(**filters)
            if related:
                queryset = queryset.select_related(*related)
            return list(queryset.order_by(*order_by))
        except DatabaseError as e:
            logger.error(f"Select from {model.__name__} failed: {e}")
            raise FetchError(str(e)) from e

    def get(self, model, **filters):
        try:
            return model.objects.get(**filters)
        except model.DoesNotExist as e:
            raise FetchError(f"{model.__name__} not found") from e
        except DatabaseError as e:
            logger.error(f"Lookup in {model.__name__} failed: {e}")
            raise FetchError(str(e)) from e


class RemoteDataGateway:

    def __init__(self, auth=None, storage=None, tables=None):
        self.auth = auth or AuthGateway()
        self.storage = storage or StorageGateway()
        self.tables = tables or TableGateway()


_default_gateway = None


def get_gateway():
    global _default_gateway
    if _default_gateway is None:
        _default_gateway = RemoteDataGateway()
    return _default_gateway
