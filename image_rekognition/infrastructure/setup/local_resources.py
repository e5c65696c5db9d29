"""
Creates the label table and both buckets against local endpoints
(DynamoDB Local, MinIO) or a sandbox account.

Usage:
    python -m image_rekognition.infrastructure.setup.local_resources [--delete]
"""
import argparse
import sys
from typing import Any, Dict, Optional

from botocore.exceptions import ClientError

from image_rekognition.adapters.aws_errors import error_code
from image_rekognition.config.aws_config import aws_config
from image_rekognition.config.settings import runtime_settings
from image_rekognition.infrastructure.databases.table_schemas import TableSchemas
from image_rekognition.infrastructure.logging.log_config import get_logger
from image_rekognition.infrastructure.logging.log_decorators import (
    log_infrastructure_operation,
    op_config
)
from image_rekognition.infrastructure.storage.s3_configurations import S3Configurations

logger = get_logger(__name__)


class LocalResourceSetup:
    """
    Idempotent creation of the resources the compute units expect.
    Existing resources are left untouched.
    """

    def __init__(self, dynamodb_resource=None, s3_client=None):
        self.dynamodb = dynamodb_resource or aws_config.dynamodb_resource
        self.s3_client = s3_client or aws_config.s3_client
        self.schemas = TableSchemas()
        self.configs = S3Configurations()

    @log_infrastructure_operation("setup_all_resources", **op_config())
    def setup_all(self) -> Dict[str, Any]:
        runtime_settings.validate_required()
        return {
            'table': self.create_label_table(runtime_settings.table_name),
            'image_bucket': self.setup_bucket(
                self.configs.image_bucket_config(runtime_settings.image_bucket_name)
            ),
            'resized_bucket': self.setup_bucket(
                self.configs.resized_bucket_config(runtime_settings.resized_bucket_name)
            ),
        }

    @log_infrastructure_operation("create_label_table", **op_config())
    def create_label_table(self, table_name: str) -> Dict[str, Any]:
        if self.table_exists(table_name):
            return {'table_name': table_name, 'action': 'skipped'}

        schema = self.schemas.labels_table_schema(table_name)
        if not self.schemas.validate_schema(schema):
            raise ValueError(f"Invalid schema for table '{table_name}'")

        try:
            table = self.dynamodb.create_table(**schema)
            table.wait_until_exists()
        except ClientError as e:
            raise RuntimeError(f"Failed to create table '{table_name}': {error_code(e)}") from e
        return {'table_name': table_name, 'action': 'created'}

    def table_exists(self, table_name: str) -> bool:
        try:
            self.dynamodb.Table(table_name).load()
            return True
        except ClientError as e:
            if error_code(e) == 'ResourceNotFoundException':
                return False
            raise

    @log_infrastructure_operation("setup_bucket", **op_config())
    def setup_bucket(self, config: Dict[str, Any]) -> Dict[str, Any]:
        bucket_name = config['name']
        action = 'skipped'
        if not self.bucket_exists(bucket_name):
            self._create_bucket(bucket_name)
            action = 'created'

        if config.get('encryption'):
            self.s3_client.put_bucket_encryption(
                Bucket=bucket_name,
                ServerSideEncryptionConfiguration=config['encryption']
            )
        if config.get('cors'):
            self.s3_client.put_bucket_cors(Bucket=bucket_name, CORSConfiguration=config['cors'])
        if config.get('lifecycle'):
            self.s3_client.put_bucket_lifecycle_configuration(
                Bucket=bucket_name,
                LifecycleConfiguration=config['lifecycle']
            )
        return {'bucket_name': bucket_name, 'action': action}

    def bucket_exists(self, bucket_name: str) -> bool:
        try:
            self.s3_client.head_bucket(Bucket=bucket_name)
            return True
        except ClientError as e:
            if error_code(e) in ('404', 'NoSuchBucket', 'NotFound'):
                return False
            raise

    def _create_bucket(self, bucket_name: str) -> None:
        # us-east-1 rejects an explicit LocationConstraint
        if runtime_settings.aws_region == 'us-east-1' or runtime_settings.use_local_s3:
            self.s3_client.create_bucket(Bucket=bucket_name)
        else:
            self.s3_client.create_bucket(
                Bucket=bucket_name,
                CreateBucketConfiguration={'LocationConstraint': runtime_settings.aws_region}
            )
        self.s3_client.get_waiter('bucket_exists').wait(Bucket=bucket_name)

    @log_infrastructure_operation("delete_label_table", **op_config("CRITICAL"))
    def delete_label_table(self, table_name: str) -> Dict[str, Any]:
        if not self.table_exists(table_name):
            return {'table_name': table_name, 'action': 'skipped'}
        table = self.dynamodb.Table(table_name)
        table.delete()
        table.wait_until_not_exists()
        return {'table_name': table_name, 'action': 'deleted'}


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Create local image recognition resources")
    parser.add_argument("--delete", action="store_true", help="Delete the label table instead")
    args = parser.parse_args(argv)

    setup = LocalResourceSetup()
    try:
        if args.delete:
            result = setup.delete_label_table(runtime_settings.table_name)
        else:
            result = setup.setup_all()
    except (ValueError, RuntimeError, ClientError) as e:
        logger.error("Local resource setup failed", extra={"extra_fields": {"error": str(e)}})
        return 1

    logger.info("Local resource setup completed", extra={"extra_fields": {"result": result}})
    return 0


if __name__ == "__main__":
    sys.exit(main())
