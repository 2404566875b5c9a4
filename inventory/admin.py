# inventory/admin.py
from django.contrib import admin
from .models import Item, Enquiry


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'user', 'created_at')
    search_fields = ('name', 'description', 'user__email')
    list_filter = ('category', 'created_at')
    readonly_fields = ('created_at',)


@admin.register(Enquiry)
class EnquiryAdmin(admin.ModelAdmin):
    list_display = ('enquirer_email', 'item', 'user', 'created_at')
    search_fields = ('enquirer_email', 'message', 'item__name')
    list_filter = ('created_at',)
    readonly_fields = ('created_at',)
