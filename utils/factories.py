"""
Test utilities and factories for creating test data
"""
import random
import string

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from inventory.models import Enquiry, Item, ItemCategory

User = get_user_model()

# Item images kept in memory with deterministic public URLs
IN_MEMORY_STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.InMemoryStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
    'item_images': {
        'BACKEND': 'django.core.files.storage.InMemoryStorage',
        'OPTIONS': {'base_url': 'https://cdn.example.com/item-images/'},
    },
}


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        return ''.join(random.choices(string.ascii_lowercase + string.digits, k=length))

    @staticmethod
    def create_user(email=None, password='testpass123'):
        if not email:
            email = f'user_{TestDataFactory.random_string(6)}@example.com'
        return User.objects.create_user(username=email, email=email, password=password)

    @staticmethod
    def create_item(user, name=None, category=ItemCategory.OTHER, description=None,
                    cover_image=None, additional_images=None):
        if not name:
            name = f'Item {TestDataFactory.random_string(6)}'
        return Item.objects.create(
            user=user,
            name=name,
            category=category,
            description=description or f'Description of {name}',
            cover_image=cover_image or f'https://cdn.example.com/item-images/{user.id}/1-cover-{name}.png',
            additional_images=additional_images or [],
        )

    @staticmethod
    def create_enquiry(item, enquirer_email='buyer@example.com', message='Still available?'):
        return Enquiry.objects.create(
            item=item,
            user=item.user,
            enquirer_email=enquirer_email,
            message=message,
        )

    @staticmethod
    def image_file(name='image.png', content=b'\x89PNG\r\n\x1a\nfake-image-bytes'):
        return SimpleUploadedFile(name, content, content_type='image/png')


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        self.credentials()
