# inventory/forms.py
"""Form state of the add-item view."""
import base64

from .models import MAX_ADDITIONAL_IMAGES


def image_preview(file_obj):
    """Data URI of an uploaded file; leaves the file rewound for the upload"""
    file_obj.seek(0)
    data = file_obj.read()
    file_obj.seek(0)
    content_type = getattr(file_obj, 'content_type', None) or 'application/octet-stream'
    return f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"


class ItemForm:

    def __init__(self, name='', category='', description='', build_previews=False):
        self.build_previews = build_previews
        self.name = name
        self.category = category
        self.description = description
        self.cover_image = None
        self.cover_preview = ''
        self.additional_images = []
        self.additional_previews = []

    def set_cover_image(self, file_obj):
        self.cover_image = file_obj
        self.cover_preview = image_preview(file_obj) if file_obj is not None and self.build_previews else ''

    def add_additional_images(self, files):
        """
        Append files in selection order, keeping at most five.

        Previews for the whole batch are read first, keyed by position,
        and committed together so they always line up with the files.
        """
        room = MAX_ADDITIONAL_IMAGES - len(self.additional_images)
        accepted = list(files)[:max(room, 0)]
        previews = {}
        if self.build_previews:
            previews = {index: image_preview(f) for index, f in enumerate(accepted)}
        self.additional_images.extend(accepted)
        self.additional_previews.extend(previews[index] for index in sorted(previews))
        return accepted

    def remove_additional_image(self, index):
        del self.additional_images[index]
        if self.additional_previews:
            del self.additional_previews[index]

    def clear(self):
        self.name = ''
        self.category = ''
        self.description = ''
        self.cover_image = None
        self.cover_preview = ''
        self.additional_images = []
        self.additional_previews = []

    @classmethod
    def from_data(cls, validated_data, build_previews=False):
        form = cls(
            build_previews=build_previews,
            name=validated_data.get('name', ''),
            category=validated_data.get('category', ''),
            description=validated_data.get('description', ''),
        )
        cover = validated_data.get('cover_image')
        if cover is not None:
            form.set_cover_image(cover)
        form.add_additional_images(validated_data.get('additional_images') or [])
        return form
