"""
S3 bucket configuration templates for local development buckets.
Pure data configurations without business logic.
"""
from typing import Dict, Any


class S3Configurations:
    """
    Static bucket settings applied by LocalResourceSetup.
    """

    # Browser uploads go straight to the image bucket under private/<sub>/
    IMAGE_BUCKET_CORS = {
        'CORSRules': [
            {
                'AllowedHeaders': ['*'],
                'AllowedMethods': ['GET', 'PUT', 'POST', 'HEAD', 'DELETE'],
                'AllowedOrigins': ['*'],
                'ExposeHeaders': ['ETag'],
                'MaxAgeSeconds': 3000
            }
        ]
    }

    BUCKET_ENCRYPTION = {
        'Rules': [
            {
                'ApplyServerSideEncryptionByDefault': {
                    'SSEAlgorithm': 'AES256'
                }
            }
        ]
    }

    INCOMPLETE_UPLOAD_LIFECYCLE = {
        'Rules': [
            {
                'ID': 'incomplete-uploads-cleanup',
                'Status': 'Enabled',
                'Filter': {'Prefix': ''},
                'AbortIncompleteMultipartUpload': {'DaysAfterInitiation': 1}
            }
        ]
    }

    @classmethod
    def image_bucket_config(cls, bucket_name: str) -> Dict[str, Any]:
        return {
            'name': bucket_name,
            'cors': cls.IMAGE_BUCKET_CORS,
            'encryption': cls.BUCKET_ENCRYPTION,
            'lifecycle': cls.INCOMPLETE_UPLOAD_LIFECYCLE,
        }

    @classmethod
    def resized_bucket_config(cls, bucket_name: str) -> Dict[str, Any]:
        """Thumbnails are only read back through the API, no CORS needed."""
        return {
            'name': bucket_name,
            'cors': None,
            'encryption': cls.BUCKET_ENCRYPTION,
            'lifecycle': None,
        }
