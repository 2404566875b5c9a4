from urllib.parse import unquote, urlsplit

from utils.file_handlers import upload_timestamp
from utils.gateway import get_gateway
from inventory.models import Item
import logging

logger = logging.getLogger(__name__)

# Uploads younger than this may belong to a creation still in flight
DEFAULT_MIN_AGE_SECONDS = 3600


def uploaded_at(name):
    """Upload time in milliseconds encoded in an image name, or None"""
    stamp = name.rsplit('/', 1)[-1].split('-', 1)[0]
    return int(stamp) if stamp.isdigit() else None


def image_name(url):
    """
    Storage name ``{principal_id}/{file}`` an item image URL points to.

    Only the last two path segments are used, so the result does not
    depend on SITE_URL, the bucket, the region or the storage location
    in effect when the URL was built.
    """
    path = unquote(urlsplit(url).path).rstrip('/')
    return '/'.join(path.split('/')[-2:])


class FileCleanupManager:
    """
    Removes item images that no item references any more.

    An aborted item creation leaves its already-uploaded images behind;
    this sweep is the only place they are ever deleted.
    """

    def __init__(self, gateway=None):
        self.gateway = gateway or get_gateway()

    def referenced_names(self, principal_id=None):
        items = Item.objects.all()
        if principal_id:
            items = items.filter(user_id=principal_id)

        names = set()
        for cover_image, additional_images in items.values_list('cover_image', 'additional_images'):
            names.add(image_name(cover_image))
            names.update(image_name(url) for url in additional_images or [])
        return names

    def find_orphaned_images(self, principal_id=None, min_age_seconds=DEFAULT_MIN_AGE_SECONDS):
        prefix = str(principal_id) if principal_id else ''
        referenced = self.referenced_names(principal_id)
        cutoff = upload_timestamp() - min_age_seconds * 1000

        orphaned = []
        for name in self.gateway.storage.list(prefix):
            stamp = uploaded_at(name)
            if stamp is not None and stamp > cutoff:
                continue
            if name not in referenced:
                orphaned.append(name)
        return orphaned

    def cleanup_orphaned_images(self, principal_id=None, dry_run=False, min_age_seconds=DEFAULT_MIN_AGE_SECONDS):
        """
        Delete stored images that no item references.

        Returns the names that were (or, with ``dry_run``, would be) deleted.
        """
        orphaned = self.find_orphaned_images(principal_id, min_age_seconds=min_age_seconds)
        if dry_run:
            logger.info(f"Dry run: {len(orphaned)} orphaned images found")
            return orphaned

        deleted = []
        for name in orphaned:
            try:
                self.gateway.storage.delete(name)
            except Exception as e:
                logger.error(f"Error deleting orphaned image {name}: {e}")
                continue
            deleted.append(name)

        logger.info(f"Cleanup completed. Deleted {len(deleted)} orphaned images")
        return deleted
