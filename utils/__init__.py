# Utils package
from .ids import new_gallery_id, new_photo_id, photo_storage_path

__all__ = ['new_gallery_id', 'new_photo_id', 'photo_storage_path']
