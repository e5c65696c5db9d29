"""
S3 implementation of ObjectStoragePort.
"""
from typing import List, Optional

from botocore.exceptions import ClientError

from image_rekognition.config.aws_config import aws_config
from image_rekognition.core.exceptions import ObjectNotFoundError, StorageError
from image_rekognition.core.ports.object_storage import ObjectStoragePort
from image_rekognition.infrastructure.logging.log_decorators import (
    log_infrastructure_operation,
    op_config
)
from ..aws_errors import error_message, is_not_found


class S3ObjectStorage(ObjectStoragePort):
    """
    Bucket access for the image and resized buckets.

    The client is shared with the rest of the process so warm Lambda
    invocations reuse connections.
    """

    def __init__(self, s3_client=None):
        self._s3_client = s3_client

    @property
    def s3_client(self):
        if self._s3_client is None:
            self._s3_client = aws_config.s3_client
        return self._s3_client

    @log_infrastructure_operation("s3_get_object", **op_config(result=False))
    def get_object(self, bucket: str, key: str) -> bytes:
        try:
            response = self.s3_client.get_object(Bucket=bucket, Key=key)
            return response['Body'].read()
        except ClientError as e:
            if is_not_found(e):
                raise ObjectNotFoundError(bucket, key) from e
            raise StorageError(error_message(e), operation="get", key=key) from e

    @log_infrastructure_operation("s3_put_object", **op_config(blacklist={"data"}))
    def put_object(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        try:
            self.s3_client.put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentType=content_type
            )
        except ClientError as e:
            raise StorageError(error_message(e), operation="put", key=key) from e

    @log_infrastructure_operation("s3_delete_object", **op_config())
    def delete_object(self, bucket: str, key: str) -> None:
        # S3 returns 204 for missing keys as well
        try:
            self.s3_client.delete_object(Bucket=bucket, Key=key)
        except ClientError as e:
            raise StorageError(error_message(e), operation="delete", key=key) from e

    @log_infrastructure_operation("s3_list_keys", **op_config())
    def list_keys(self, bucket: str, prefix: str) -> List[str]:
        keys: List[str] = []
        try:
            paginator = self.s3_client.get_paginator('list_objects_v2')
            for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
                keys.extend(item['Key'] for item in page.get('Contents', []))
        except ClientError as e:
            raise StorageError(error_message(e), operation="list", key=prefix) from e
        return sorted(keys)
