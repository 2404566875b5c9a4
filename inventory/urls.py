from django.urls import path
from .views import (
    ItemListCreateView,
    ItemPreviewView,
    ItemDetailView,
    PublicItemDetailView,
    EnquiryCreateView,
    EnquiryListView,
)

urlpatterns = [
    # Owner's catalog
    path('items/', ItemListCreateView.as_view(), name='item-list-create'),
    path('items/preview/', ItemPreviewView.as_view(), name='item-preview'),
    path('items/<uuid:id>/', ItemDetailView.as_view(), name='item-detail'),

    # Anonymous visitors
    path('public/items/<uuid:id>/', PublicItemDetailView.as_view(), name='public-item-detail'),
    path('public/items/<uuid:id>/enquiries/', EnquiryCreateView.as_view(), name='enquiry-create'),

    # Owner's inbox
    path('enquiries/', EnquiryListView.as_view(), name='enquiry-list'),
]
