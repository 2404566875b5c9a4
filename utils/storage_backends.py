from django.conf import settings
from django.utils.encoding import filepath_to_uri
from storages.backends.s3boto3 import S3Boto3Storage
from botocore.exceptions import ClientError
import logging


logger = logging.getLogger(__name__)


class ItemImageStorage(S3Boto3Storage):
    """
    Public-read S3 storage for item images.

    Objects are addressed as ``{principal_id}/{timestamp}-...`` inside the
    ``item-images`` location and served through unsigned URLs.
    """
    default_acl = 'public-read'
    file_overwrite = True
    custom_domain = False
    querystring_auth = False

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('bucket_name', settings.AWS_STORAGE_BUCKET_NAME)
        kwargs.setdefault('region_name', settings.AWS_S3_REGION_NAME)
        kwargs.setdefault('endpoint_url', settings.AWS_S3_ENDPOINT_URL)
        kwargs.setdefault('location', settings.ITEM_IMAGES_LOCATION)
        super().__init__(*args, **kwargs)

    def exists(self, name):
        """Handle permission errors gracefully"""
        try:
            return super().exists(name)
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', '')
            if error_code in ['403', 'Forbidden', 'AccessDenied']:
                logger.warning(f"Permission denied checking if {name} exists. Proceeding with upload.")
                return False
            raise

    def _save(self, name, content):
        try:
            return super()._save(name, content)
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', '')
            logger.error(f"S3 Upload Error for {name}: {error_code} - {str(e)}")

            if error_code in ['403', 'Forbidden', 'AccessDenied']:
                raise PermissionError(f"Permission denied uploading {name} to S3.") from e
            raise

    def url(self, name, parameters=None, expire=None, http_method=None):
        """
        Direct public URL of an uploaded object
        """
        if self.endpoint_url:
            return super().url(name, parameters=parameters, expire=expire, http_method=http_method)
        return f"https://{self.bucket_name}.s3.{self.region_name}.amazonaws.com/{self.location}/{filepath_to_uri(name)}"
