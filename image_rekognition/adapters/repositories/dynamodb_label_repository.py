"""
DynamoDB implementation of LabelRepositoryPort.
One item per image, partition key 'image'.
"""
from typing import Optional

from botocore.exceptions import ClientError

from image_rekognition.config.aws_config import aws_config
from image_rekognition.config.settings import runtime_settings
from image_rekognition.core.exceptions import StorageError
from image_rekognition.core.models.label import LabelRecord
from image_rekognition.core.ports.label_repository import LabelRepositoryPort
from image_rekognition.infrastructure.logging.log_decorators import (
    log_infrastructure_operation,
    op_config
)
from ..aws_errors import error_message

PARTITION_KEY = "image"


class DynamoDBLabelRepository(LabelRepositoryPort):
    """
    Label store backed by the TABLE DynamoDB table.
    put_item gives the last-write-wins semantics required for re-uploads.
    """

    def __init__(self, table=None, table_name: Optional[str] = None):
        self.table_name = table_name or runtime_settings.table_name
        self._table = table

    @property
    def table(self):
        if self._table is None:
            self._table = aws_config.get_table(self.table_name)
        return self._table

    @log_infrastructure_operation("save_label_record", **op_config(result=False))
    def save(self, record: LabelRecord) -> LabelRecord:
        try:
            self.table.put_item(Item=record.to_item(PARTITION_KEY))
            return record
        except ClientError as e:
            raise StorageError(
                f"Failed to save labels: {error_message(e)}",
                operation="put_item",
                key=record.image_id
            ) from e

    def get(self, image_id: str) -> Optional[LabelRecord]:
        try:
            response = self.table.get_item(Key={PARTITION_KEY: image_id})
        except ClientError as e:
            raise StorageError(
                f"Failed to get labels: {error_message(e)}",
                operation="get_item",
                key=image_id
            ) from e

        item = response.get('Item')
        if not item:
            return None
        return LabelRecord.from_item(item, PARTITION_KEY)

    @log_infrastructure_operation("delete_label_record", **op_config())
    def delete(self, image_id: str) -> bool:
        try:
            response = self.table.delete_item(
                Key={PARTITION_KEY: image_id},
                ReturnValues='ALL_OLD'
            )
        except ClientError as e:
            raise StorageError(
                f"Failed to delete labels: {error_message(e)}",
                operation="delete_item",
                key=image_id
            ) from e
        return bool(response.get('Attributes'))
