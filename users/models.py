import uuid
from django.contrib.auth.models import AbstractUser
from django.db import models


class CustomUser(AbstractUser):
    """
    The authenticated principal. Users sign in with their email address;
    ``username`` mirrors it so Django's auth backends keep working.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)

    def as_principal(self):
        return {'id': str(self.id), 'email': self.email}

    def __str__(self):
        return self.email or self.username
