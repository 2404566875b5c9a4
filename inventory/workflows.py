# inventory/workflows.py
"""
The two write paths of the app.

Both are a straight sequence of gateway calls: the first failure aborts
the rest and nothing already done is rolled back. In particular images
uploaded before a failed upload or a failed insert stay in storage
(see ``utils.file_cleanup`` for the out-of-band sweep).
"""
import logging

from utils.exceptions import InventoryError, MissingCoverImage, ValidationError
from utils.file_handlers import additional_image_path, cover_image_path
from utils.gateway import get_gateway
from .models import Enquiry, Item, ItemCategory
from .submission import SubmissionFlow

logger = logging.getLogger(__name__)


class ItemCreationWorkflow:

    def __init__(self, principal, gateway=None, flow=None):
        self.principal = principal
        self.gateway = gateway or get_gateway()
        self.flow = flow or SubmissionFlow()

    def submit(self, form):
        self.flow.begin()
        try:
            self._validate(form)
            cover_url = self._upload(
                cover_image_path(self.principal.id, form.cover_image.name),
                form.cover_image,
            )
            # Sequential on purpose: URLs must come back in selection order
            additional_urls = []
            for index, image in enumerate(form.additional_images):
                additional_urls.append(self._upload(
                    additional_image_path(self.principal.id, index, image.name),
                    image,
                ))
            item = self.gateway.tables.insert(
                Item,
                user=self.principal,
                name=form.name,
                category=form.category,
                description=form.description,
                cover_image=cover_url,
                additional_images=additional_urls,
            )
        except InventoryError as e:
            logger.warning(f"Item creation for {self.principal.email} failed: {e.message}")
            self.flow.fail(e.message)
            raise

        form.clear()
        self.flow.succeed()
        logger.info(f"Created item {item.id} with {len(additional_urls)} additional images")
        return item

    def _validate(self, form):
        if form.cover_image is None:
            raise MissingCoverImage()
        if not form.name.strip():
            raise ValidationError('Item name is required')
        if form.category not in ItemCategory.values:
            raise ValidationError(f'Unknown item type: {form.category}')
        if not form.description.strip():
            raise ValidationError('Description is required')

    def _upload(self, path, file_obj):
        name = self.gateway.storage.upload(path, file_obj)
        return self.gateway.storage.get_public_url(name)


class EnquirySubmission:

    def __init__(self, item, gateway=None, flow=None):
        self.item = item
        self.gateway = gateway or get_gateway()
        self.flow = flow or SubmissionFlow()

    def submit(self, enquirer_email, message=''):
        self.flow.begin()
        try:
            enquirer_email = (enquirer_email or '').strip()
            if not enquirer_email:
                raise ValidationError('Email address is required')
            enquiry = self.gateway.tables.insert(
                Enquiry,
                item=self.item,
                user_id=self.item.user_id,
                enquirer_email=enquirer_email,
                # Stored as typed; only a blank message is replaced
                message=message if (message or '').strip() else Enquiry.default_message(self.item.name),
            )
        except InventoryError as e:
            logger.warning(f"Enquiry on item {self.item.id} failed: {e.message}")
            self.flow.fail(e.message)
            raise

        self.flow.succeed()
        return enquiry
