from minerva.libraries.base import LibraryBase, LibraryMeta

from .models import GalleryBlockModel


class GalleryLibrary(LibraryBase):
    @property
    def meta(self) -> LibraryMeta:
        return LibraryMeta(
            name="gallery",
            version="1.0.0",
            description="Image gallery blocks",
            models=[GalleryBlockModel],
        )


library = GalleryLibrary()
