# inventory/views.py
from rest_framework import status, parsers, serializers
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from logs.utils import log_activity
from users.session import SessionProvider
from utils.exceptions import (
    FetchError,
    InsertError,
    SubmissionInProgress,
    UploadError,
    ValidationError,
)
from utils.gateway import get_gateway
from .forms import ItemForm
from .models import Item
from .serializers import (
    EnquiryCreateSerializer,
    EnquirySerializer,
    ItemCreateSerializer,
    ItemPreviewSerializer,
    ItemSerializer,
)
from .viewmodels import EnquiryInbox, ImageCarousel, ItemCatalog
from .workflows import EnquirySubmission, ItemCreationWorkflow


def error_response(error):
    """Inline display of a workflow error"""
    if isinstance(error, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, SubmissionInProgress):
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(error, (UploadError, InsertError)):
        status_code = status.HTTP_502_BAD_GATEWAY
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return Response({'error': error.message, 'code': error.code}, status=status_code)


def item_detail_payload(item, image_index):
    carousel = ImageCarousel(item)
    if image_index:
        carousel.go_to(image_index)
    data = ItemSerializer(item).data
    data['carousel'] = carousel.as_dict()
    return data


def image_index_param(request):
    value = request.query_params.get('image', '0')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise serializers.ValidationError({'image': 'A valid integer is required.'})


class ItemListCreateView(APIView):
    permission_classes = [IsAuthenticated]
    parser_classes = [parsers.MultiPartParser, parsers.FormParser, parsers.JSONParser]

    def get(self, request):
        session = SessionProvider.for_request(request)
        catalog = ItemCatalog(session, view_mode=request.query_params.get('view', 'grid'))
        try:
            search = request.query_params.get('search', '')
            category = request.query_params.get('category', '')
            items = catalog.filtered(search=search, category=category)
            return Response({
                'items': ItemSerializer(items, many=True).data,
                'categories': catalog.categories,
                'count': len(items),
                'total': len(catalog.items),
                'view': catalog.view_mode,
            })
        finally:
            catalog.close()

    def post(self, request):
        serializer = ItemCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        form = ItemForm.from_data(serializer.validated_data)
        workflow = ItemCreationWorkflow(request.user)
        try:
            item = workflow.submit(form)
        except (ValidationError, UploadError, InsertError, SubmissionInProgress) as e:
            return error_response(e)

        log_activity(
            user=request.user,
            note=f"Item added: {item.name}",
            related_model='Item',
            related_id=str(item.id)
        )
        return Response({
            'item': ItemSerializer(item).data,
            **workflow.flow.as_dict(),
        }, status=status.HTTP_201_CREATED)


class ItemPreviewView(APIView):
    """Echo the add-item form state with image previews, in selection order"""
    permission_classes = [IsAuthenticated]
    parser_classes = [parsers.MultiPartParser, parsers.FormParser]

    def post(self, request):
        serializer = ItemPreviewSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        form = ItemForm.from_data(serializer.validated_data, build_previews=True)
        return Response({
            'cover_image': form.cover_image.name if form.cover_image else None,
            'cover_preview': form.cover_preview or None,
            'additional_images': [f.name for f in form.additional_images],
            'additional_previews': form.additional_previews,
        })


class ItemDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, id):
        session = SessionProvider.for_request(request)
        catalog = ItemCatalog(session)
        try:
            item = catalog.select(id)
        finally:
            catalog.close()
        if item is None:
            return Response({'detail': 'Item not found'}, status=status.HTTP_404_NOT_FOUND)
        return Response(item_detail_payload(item, image_index_param(request)))


class PublicItemDetailView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, id):
        try:
            item = get_gateway().tables.get(Item, id=id)
        except FetchError:
            return Response({'detail': 'Item not found'}, status=status.HTTP_404_NOT_FOUND)
        data = item_detail_payload(item, image_index_param(request))
        data.pop('user', None)
        return Response(data)


class EnquiryCreateView(APIView):
    """Anonymous visitors send an enquiry about one item"""
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, id):
        try:
            item = get_gateway().tables.get(Item, id=id)
        except FetchError:
            return Response({'detail': 'Item not found'}, status=status.HTTP_404_NOT_FOUND)

        serializer = EnquiryCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        submission = EnquirySubmission(item)
        try:
            enquiry = submission.submit(
                serializer.validated_data['enquirer_email'],
                serializer.validated_data.get('message', ''),
            )
        except (ValidationError, InsertError, SubmissionInProgress) as e:
            return error_response(e)

        log_activity(
            user=item.user,
            note=f"Enquiry received from {enquiry.enquirer_email} about {item.name}",
            related_model='Enquiry',
            related_id=str(enquiry.id)
        )
        return Response({
            'enquiry': {
                'id': str(enquiry.id),
                'created_at': enquiry.created_at,
                'item_id': str(item.id),
                'enquirer_email': enquiry.enquirer_email,
                'message': enquiry.message,
            },
            **submission.flow.as_dict(),
        }, status=status.HTTP_201_CREATED)


class EnquiryListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        item_id = request.query_params.get('item')
        if item_id:
            item_id = serializers.UUIDField().run_validation(item_id)

        session = SessionProvider.for_request(request)
        inbox = EnquiryInbox(session, item_id=item_id or None)
        try:
            enquiries = inbox.filtered(search=request.query_params.get('search', ''))
            return Response({
                'enquiries': EnquirySerializer(enquiries, many=True).data,
                'count': len(enquiries),
                'total': len(inbox.enquiries),
            })
        finally:
            inbox.close()
