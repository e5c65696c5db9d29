from .in_memory_queue import InMemoryMessageQueue
from .sqs_message_queue import SQSMessageQueue

__all__ = ["InMemoryMessageQueue", "SQSMessageQueue"]
