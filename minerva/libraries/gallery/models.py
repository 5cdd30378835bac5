"""Gallery library models: blocks that display a list of images."""

from minerva.models.block import BlockModel
from minerva.security.access import LOGIN_REDIRECT, AccessRule


class GalleryBlockModel(BlockModel):
    library = "gallery"
    display_name = "Gallery Block"
    # Any signed-in user may build galleries; listing and removal stay with managers
    access = {
        "index": [AccessRule("allowManagers", LOGIN_REDIRECT)],
        "create": [AccessRule("allowAuthenticated", LOGIN_REDIRECT)],
        "update": [AccessRule("allowAuthenticated", LOGIN_REDIRECT)],
        "delete": [AccessRule("allowManagers", LOGIN_REDIRECT)],
        "read": [AccessRule("allowAll")],
    }
    fields = {
        **BlockModel.fields,
        "images": {
            "type": "textarea",
            "label": "Images",
            "position": "options",
            "help_text": "One image path per line.",
        },
    }

    def new(self, data=None, library=None):
        record = super().new(data, library)
        record.extra = {"images": [], **(record.extra or {})}
        return record

    def before_save(self, data):
        images = data.get("images")
        if isinstance(images, str):
            data["images"] = [line.strip() for line in images.splitlines() if line.strip()]
        return data

    def after_find(self, record):
        if record.extra is None or "images" not in record.extra:
            record.extra = {**(record.extra or {}), "images": []}
        return record
