from .s3_object_storage import S3ObjectStorage

__all__ = ["S3ObjectStorage"]
