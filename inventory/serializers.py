# inventory/serializers.py
from rest_framework import serializers
from .models import Item, Enquiry, ItemCategory
from .viewmodels import reply_link


class ItemSerializer(serializers.ModelSerializer):
    images = serializers.ListField(child=serializers.URLField(), read_only=True)

    class Meta:
        model = Item
        fields = [
            'id', 'user', 'created_at', 'name', 'category', 'description',
            'cover_image', 'additional_images', 'images',
        ]
        read_only_fields = fields


class ItemCreateSerializer(serializers.Serializer):
    """
    Multipart payload of the add-item form. The cover image is optional
    here so its absence is reported by the workflow as MissingCoverImage.
    """
    name = serializers.CharField(max_length=255)
    category = serializers.ChoiceField(choices=ItemCategory.choices)
    description = serializers.CharField()
    cover_image = serializers.FileField(required=False, allow_null=True)
    additional_images = serializers.ListField(
        child=serializers.FileField(), required=False, default=list
    )


class EnquiryCreateSerializer(serializers.Serializer):
    enquirer_email = serializers.EmailField()
    message = serializers.CharField(required=False, allow_blank=True, default='', trim_whitespace=False)


class EnquiryItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = Item
        fields = ['id', 'name', 'category', 'cover_image']


class EnquirySerializer(serializers.ModelSerializer):
    item = EnquiryItemSerializer(read_only=True)
    reply_link = serializers.SerializerMethodField()

    class Meta:
        model = Enquiry
        fields = ['id', 'created_at', 'enquirer_email', 'message', 'item', 'reply_link']

    def get_reply_link(self, obj):
        return reply_link(obj)


class ItemPreviewSerializer(serializers.Serializer):
    cover_image = serializers.FileField(required=False, allow_null=True)
    additional_images = serializers.ListField(
        child=serializers.FileField(), required=False, default=list
    )
