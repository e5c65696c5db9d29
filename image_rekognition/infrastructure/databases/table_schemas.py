"""
DynamoDB table schema definitions for local development.
The deployed table is defined by the CDK stack with the same key.
"""
from typing import Dict, Any

from image_rekognition.adapters.repositories.dynamodb_label_repository import PARTITION_KEY


class TableSchemas:
    """
    Labels table layout:
    - image (PK): image identifier, the storage key minus 'private/'
    - labels: label names ordered by confidence
    - confidence: map of label name to confidence
    - source_key / resized_key: object keys in the image and resized buckets
    - detected_at: ISO timestamp of the detection
    """

    @staticmethod
    def labels_table_schema(table_name: str) -> Dict[str, Any]:
        """
        Args:
            table_name: Name for the DynamoDB table

        Returns:
            Keyword arguments for create_table
        """
        return {
            'TableName': table_name,
            'KeySchema': [
                {
                    'AttributeName': PARTITION_KEY,
                    'KeyType': 'HASH'
                }
            ],
            'AttributeDefinitions': [
                {
                    'AttributeName': PARTITION_KEY,
                    'AttributeType': 'S'
                }
            ],
            'BillingMode': 'PAY_PER_REQUEST',
            'Tags': [
                {'Key': 'Project', 'Value': 'ImageRekognition'},
                {'Key': 'TableType', 'Value': 'Labels'}
            ]
        }

    @classmethod
    def validate_schema(cls, schema: Dict[str, Any]) -> bool:
        """Every key attribute must also be declared in AttributeDefinitions."""
        required_fields = ['TableName', 'KeySchema', 'AttributeDefinitions']
        if any(field not in schema for field in required_fields):
            return False
        if not schema['KeySchema']:
            return False

        key_attributes = {key['AttributeName'] for key in schema['KeySchema']}
        defined_attributes = {attr['AttributeName'] for attr in schema['AttributeDefinitions']}
        return key_attributes.issubset(defined_attributes)
