"""
Runtime settings for the image recognition compute units.
Values are sourced from the Lambda environment contract or local env files.
"""
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RuntimeSettings(BaseSettings):
    """
    Runtime configuration shared by the Detection Worker and the Front-End API.

    The environment contract passed by the stack uses the canonical names
    TABLE, BUCKET and RESIZEDBUCKET. THUMBBUCKET is accepted as a fallback
    for the resized bucket.
    """

    # ENVIRONMENT & DEPLOYMENT
    environment: str = "development"
    service_name: str = "image-rekognition"

    # AWS CORE CONFIGURATION
    aws_region: str = "us-east-1"
    aws_max_retry_attempts: int = 3
    aws_max_pool_connections: int = 50

    # ENVIRONMENT CONTRACT
    table_name: str = Field(
        default="",
        validation_alias=AliasChoices("TABLE", "table_name"),
    )
    image_bucket_name: str = Field(
        default="",
        validation_alias=AliasChoices("BUCKET", "image_bucket_name"),
    )
    resized_bucket_name: str = Field(
        default="",
        validation_alias=AliasChoices("RESIZEDBUCKET", "THUMBBUCKET", "resized_bucket_name"),
    )

    # LOCAL ENDPOINTS (DynamoDB Local / MinIO)
    dynamodb_endpoint_url: Optional[str] = None
    s3_endpoint_url: Optional[str] = None
    s3_use_ssl: bool = True
    s3_signature_version: str = "s3v4"

    # IMAGE PROCESSING
    upload_prefix: str = "private/"
    max_labels: int = 10
    min_confidence: float = 70.0
    thumbnail_size: int = 256

    # IDENTITY
    cognito_user_pool_client_id: Optional[str] = None
    identity_pool_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("IDENTITY_POOL_ID", "identity_pool_id"),
    )
    user_pool_provider_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("USER_POOL_PROVIDER", "user_pool_provider_name"),
    )

    # QUEUE
    queue_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("QUEUE_URL", "queue_url"),
    )

    # LOGGING
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=[".env.local", ".env.development", ".env.staging", ".env.production"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore"
    )

    @property
    def use_local_dynamodb(self) -> bool:
        """Check if should use local DynamoDB."""
        return self.dynamodb_endpoint_url is not None

    @property
    def use_local_s3(self) -> bool:
        """Check if should use local S3 (MinIO)."""
        return self.s3_endpoint_url is not None

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    def validate_required(self) -> None:
        """
        Validate that the environment contract is complete.

        Raises:
            ValueError: If any of TABLE, BUCKET or RESIZEDBUCKET is missing
        """
        required = [
            ("TABLE", self.table_name),
            ("BUCKET", self.image_bucket_name),
            ("RESIZEDBUCKET", self.resized_bucket_name),
        ]
        missing = [name for name, value in required if not value]
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")


# Global runtime settings instance
runtime_settings = RuntimeSettings()
