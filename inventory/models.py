# inventory/models.py
import uuid
from django.conf import settings
from django.db import models
from django.db.models import Q

MAX_ADDITIONAL_IMAGES = 5


class ItemCategory(models.TextChoices):
    SHIRT = 'Shirt', 'Shirt'
    PANT = 'Pant', 'Pant'
    SHOES = 'Shoes', 'Shoes'
    SPORTS_GEAR = 'Sports Gear', 'Sports Gear'
    ELECTRONICS = 'Electronics', 'Electronics'
    ACCESSORIES = 'Accessories', 'Accessories'
    BOOKS = 'Books', 'Books'
    HOME_AND_GARDEN = 'Home & Garden', 'Home & Garden'
    OTHER = 'Other', 'Other'


class Item(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='items')
    created_at = models.DateTimeField(auto_now_add=True)
    name = models.CharField(max_length=255)
    category = models.CharField(max_length=50, choices=ItemCategory.choices)
    description = models.TextField()

    # Public URLs of the uploaded images
    cover_image = models.URLField(max_length=1024)
    additional_images = models.JSONField(default=list, blank=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(condition=~Q(cover_image=''), name='item_cover_image_not_empty'),
        ]

    @property
    def images(self):
        return [self.cover_image, *self.additional_images]

    def __str__(self):
        return self.name


class Enquiry(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    item = models.ForeignKey(Item, on_delete=models.CASCADE, related_name='enquiries')
    # Owner of the item, copied so the inbox can be scoped without a join
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='enquiries')
    enquirer_email = models.EmailField()
    message = models.TextField()

    class Meta:
        ordering = ['-created_at']
        verbose_name_plural = 'enquiries'

    @staticmethod
    def default_message(item_name):
        return f"I'm interested in your {item_name}. Please contact me for more details."

    def __str__(self):
        return f"{self.enquirer_email} - {self.item_id}"
