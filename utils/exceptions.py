# utils/exceptions.py
"""
Error taxonomy shared by the session, gateway and workflow layers.

Every error carries a display string (``message``) and a stable ``code``
so views can render it inline without knowing where it came from.
"""


class InventoryError(Exception):
    code = 'error'

    def __init__(self, message=None):
        self.message = message or self.default_message()
        super().__init__(self.message)

    def default_message(self):
        return 'Something went wrong'


class ValidationError(InventoryError):
    """A required field is missing; raised before any gateway call."""
    code = 'ValidationError'

    def default_message(self):
        return 'Invalid submission'


class MissingCoverImage(ValidationError):
    code = 'MissingCoverImage'

    def default_message(self):
        return 'Cover image is required'


class AuthError(InventoryError):
    code = 'AuthError'

    def default_message(self):
        return 'Authentication failed'


class UploadError(InventoryError):
    code = 'UploadError'

    def default_message(self):
        return 'Failed to upload image'


class InsertError(InventoryError):
    code = 'InsertError'

    def default_message(self):
        return 'Failed to save record'


class FetchError(InventoryError):
    code = 'FetchError'

    def default_message(self):
        return 'Failed to fetch records'


class SubmissionInProgress(InventoryError):
    code = 'SubmissionInProgress'

    def default_message(self):
        return 'A submission is already in progress'
