"""
Amazon SQS implementation of MessageQueuePort.
Visibility timeout and redrive are enforced by SQS itself.
"""
from typing import List, Optional

from botocore.exceptions import ClientError

from image_rekognition.config.aws_config import aws_config
from image_rekognition.core.exceptions import StorageError
from image_rekognition.core.models.queue import MessageState, QueueMessage
from image_rekognition.core.ports.message_queue import MessageQueuePort
from image_rekognition.infrastructure.logging.log_decorators import (
    log_infrastructure_operation,
    op_config
)
from ..aws_errors import error_message


class SQSMessageQueue(MessageQueuePort):
    """
    Args:
        queue_url: URL of the primary queue
        wait_time_seconds: Long-poll duration for receive (max 20)
    """

    def __init__(self, queue_url: str, wait_time_seconds: int = 20, sqs_client=None):
        if not queue_url:
            raise ValueError("Queue URL is required")
        self.queue_url = queue_url
        self.wait_time_seconds = min(max(wait_time_seconds, 0), 20)
        self._client = sqs_client

    @property
    def client(self):
        if self._client is None:
            self._client = aws_config.sqs_client
        return self._client

    @log_infrastructure_operation("sqs_send_message", **op_config())
    def send(self, body: str) -> str:
        try:
            response = self.client.send_message(QueueUrl=self.queue_url, MessageBody=body)
        except ClientError as e:
            raise StorageError(error_message(e), operation="send_message") from e
        return response['MessageId']

    def receive(self, max_messages: int = 10) -> List[QueueMessage]:
        try:
            response = self.client.receive_message(
                QueueUrl=self.queue_url,
                MaxNumberOfMessages=min(max(max_messages, 1), 10),
                WaitTimeSeconds=self.wait_time_seconds,
                AttributeNames=['ApproximateReceiveCount']
            )
        except ClientError as e:
            raise StorageError(error_message(e), operation="receive_message") from e

        return [
            QueueMessage(
                message_id=raw['MessageId'],
                body=raw['Body'],
                receive_count=int(raw.get('Attributes', {}).get('ApproximateReceiveCount', 1)),
                receipt_handle=raw['ReceiptHandle'],
                state=MessageState.IN_FLIGHT,
                attributes=raw.get('Attributes', {})
            )
            for raw in response.get('Messages', [])
        ]

    @log_infrastructure_operation("sqs_delete_message", **op_config(args=False))
    def acknowledge(self, message: QueueMessage) -> None:
        self._require_handle(message)
        try:
            self.client.delete_message(QueueUrl=self.queue_url, ReceiptHandle=message.receipt_handle)
        except ClientError as e:
            raise StorageError(error_message(e), operation="delete_message", key=message.message_id) from e
        message.state = MessageState.DELETED

    def release(self, message: QueueMessage) -> None:
        self._require_handle(message)
        try:
            self.client.change_message_visibility(
                QueueUrl=self.queue_url,
                ReceiptHandle=message.receipt_handle,
                VisibilityTimeout=0
            )
        except ClientError as e:
            raise StorageError(error_message(e), operation="change_message_visibility",
                               key=message.message_id) from e
        message.state = MessageState.AVAILABLE

    @staticmethod
    def _require_handle(message: QueueMessage) -> Optional[str]:
        if not message.receipt_handle:
            raise ValueError(f"Message {message.message_id} has no receipt handle")
        return message.receipt_handle
