import os
import time


def clean_filename(filename):
    """Strip any directory part a client sent along with the file name"""
    if not filename:
        return 'unknown'
    name = os.path.basename(str(filename).replace('\\', '/')).strip()
    return name or 'unknown'


def upload_timestamp():
    """Milliseconds since the epoch, the uniqueness token of an image path"""
    return int(time.time() * 1000)


def cover_image_path(principal_id, filename, timestamp=None):
    """Path: {principal_id}/{timestamp}-cover-{filename}"""
    if timestamp is None:
        timestamp = upload_timestamp()
    return f"{principal_id}/{timestamp}-cover-{clean_filename(filename)}"


def additional_image_path(principal_id, index, filename, timestamp=None):
    """Path: {principal_id}/{timestamp}-additional-{index}-{filename}"""
    if timestamp is None:
        timestamp = upload_timestamp()
    return f"{principal_id}/{timestamp}-additional-{index}-{clean_filename(filename)}"
