"""
Message queue port.
Provider-independent at-least-once queue with a visibility timeout and a
bounded receive count.
"""
from abc import ABC, abstractmethod
from typing import List

from ..models.queue import QueueMessage


class MessageQueuePort(ABC):

    @abstractmethod
    def send(self, body: str) -> str:
        """
        Enqueue a message.

        Returns:
            Message identifier
        """
        pass

    @abstractmethod
    def receive(self, max_messages: int = 10) -> List[QueueMessage]:
        """
        Receive up to max_messages visible messages.

        Received messages stay invisible to other consumers until they are
        acknowledged, released, or the visibility timeout elapses.
        """
        pass

    @abstractmethod
    def acknowledge(self, message: QueueMessage) -> None:
        """Delete a received message so it is never redelivered."""
        pass

    @abstractmethod
    def release(self, message: QueueMessage) -> None:
        """Make a received message visible again for redelivery."""
        pass
