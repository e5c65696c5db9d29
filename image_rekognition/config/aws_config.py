"""
AWS service configuration and client management.
Creates S3, DynamoDB, Rekognition, SQS and Cognito clients on first use so
warm Lambda invocations reuse the same connections.
"""
from typing import Optional, Dict, Any

import boto3
from botocore.config import Config

from .settings import runtime_settings


class AWSConfig:
    """
    Manages AWS service connections and configuration.
    Local endpoints (DynamoDB Local, MinIO) are honoured when configured.
    """

    def __init__(self):
        self._dynamodb_resource = None
        self._s3_client = None
        self._rekognition_client = None
        self._sqs_client = None
        self._cognito_client = None
        self._cognito_identity_client = None
        self._boto_config = Config(
            region_name=runtime_settings.aws_region,
            retries={
                'max_attempts': runtime_settings.aws_max_retry_attempts,
                'mode': 'adaptive'
            },
            max_pool_connections=runtime_settings.aws_max_pool_connections
        )

    @property
    def dynamodb_resource(self):
        """Get or create DynamoDB resource with proper configuration."""
        if self._dynamodb_resource is None:
            self._dynamodb_resource = self._create_dynamodb_resource()
        return self._dynamodb_resource

    @property
    def s3_client(self):
        """Get or create S3 client with proper configuration."""
        if self._s3_client is None:
            self._s3_client = self._create_s3_client()
        return self._s3_client

    @property
    def rekognition_client(self):
        if self._rekognition_client is None:
            self._rekognition_client = boto3.client('rekognition', config=self._boto_config)
        return self._rekognition_client

    @property
    def sqs_client(self):
        if self._sqs_client is None:
            self._sqs_client = boto3.client('sqs', config=self._boto_config)
        return self._sqs_client

    @property
    def cognito_client(self):
        if self._cognito_client is None:
            self._cognito_client = boto3.client('cognito-idp', config=self._boto_config)
        return self._cognito_client

    @property
    def cognito_identity_client(self):
        if self._cognito_identity_client is None:
            self._cognito_identity_client = boto3.client('cognito-identity', config=self._boto_config)
        return self._cognito_identity_client

    def _create_dynamodb_resource(self):
        """Create DynamoDB resource with environment-specific configuration."""
        kwargs: Dict[str, Any] = {
            'service_name': 'dynamodb',
            'config': self._boto_config,
            'region_name': runtime_settings.aws_region
        }

        if runtime_settings.use_local_dynamodb:
            kwargs.update({
                'endpoint_url': runtime_settings.dynamodb_endpoint_url,
                'aws_access_key_id': 'fakeMyKeyId',
                'aws_secret_access_key': 'fakeSecretAccessKey'
            })

        return boto3.resource(**kwargs)

    def _create_s3_client(self):
        """
        Create S3 client with environment-specific configuration.
        """
        s3_config = self._boto_config.merge(
            Config(signature_version=runtime_settings.s3_signature_version)
        )
        kwargs: Dict[str, Any] = {
            'service_name': 's3',
            'config': s3_config,
            'region_name': runtime_settings.aws_region
        }
        if runtime_settings.use_local_s3:
            kwargs.update({
                'endpoint_url': runtime_settings.s3_endpoint_url,
                'aws_access_key_id': 'minioadmin',
                'aws_secret_access_key': 'minioadmin',
                'use_ssl': runtime_settings.s3_use_ssl
            })
        return boto3.client(**kwargs)

    def get_table(self, table_name: Optional[str] = None):
        """
        Get DynamoDB table with error handling.

        Args:
            table_name: Name of the DynamoDB table, defaults to TABLE

        Returns:
            DynamoDB table resource

        Raises:
            ConnectionError: If table connection fails
        """
        name = table_name or runtime_settings.table_name
        try:
            return self.dynamodb_resource.Table(name)
        except Exception as e:
            raise ConnectionError(
                f"Failed to connect to DynamoDB table '{name}': {str(e)}"
            ) from e


# Global AWS configuration instance
aws_config = AWSConfig()
