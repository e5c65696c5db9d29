"""
Deployment settings for the CDK stack.
Every value can be overridden with a STACK_-prefixed environment variable.
"""
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class StackSettings(BaseSettings):
    """
    Infrastructure topology configuration.
    Names, queue bounds and compute sizing for the serverless application.
    """

    stack_name: str = "ImageRekognitionStack"

    # STORAGE
    image_bucket_id: str = "cdk-rek-imagebucket"
    resized_bucket_id: str = "cdk-rek-imagebucket-resized"
    website_bucket_id: str = "cdk-rekn-publicbucket"
    website_asset_path: str = "public"
    # CIDR list for public read of the website bucket. Must be set before deploy.
    allowed_ip_ranges: List[str] = []

    # LABEL STORE
    table_id: str = "ImageLabels"
    table_partition_key: str = "image"

    # QUEUE TOPOLOGY
    queue_name: str = "ImageQueue"
    dead_letter_queue_name: str = "ImageDLQueue"
    visibility_timeout_seconds: int = 30
    receive_wait_seconds: int = 20
    max_receive_count: int = 2
    notification_prefix: str = "private/"
    # Deprecated bucket-to-worker trigger without retry
    direct_trigger: bool = False

    # COMPUTE
    python_runtime: str = "python3.12"
    worker_timeout_seconds: int = 30
    worker_memory_mb: int = 1024
    service_timeout_seconds: int = 30
    layer_asset_path: str = "layers/runtime"

    model_config = SettingsConfigDict(
        env_prefix="STACK_",
        env_file=[".env.local", ".env.development", ".env.staging", ".env.production"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def validate_website_access(self) -> None:
        """
        Raises:
            ValueError: If no IP allow-list is configured for the website bucket
        """
        if not self.allowed_ip_ranges:
            raise ValueError(
                "STACK_ALLOWED_IP_RANGES must list the CIDR ranges allowed to read the website bucket"
            )


# Global stack settings instance
stack_settings = StackSettings()
