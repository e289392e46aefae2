from .media_upload_service import MediaUploadService

__all__ = ["MediaUploadService"]
