from .dynamodb_label_repository import DynamoDBLabelRepository

__all__ = ["DynamoDBLabelRepository"]
