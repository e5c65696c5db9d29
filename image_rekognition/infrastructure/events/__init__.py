from .s3_event_parser import S3EventParser

__all__ = ["S3EventParser"]
