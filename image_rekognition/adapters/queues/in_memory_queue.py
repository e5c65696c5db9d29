"""
In-process message queue with SQS delivery semantics.

Used by the local queue consumer and by tests to exercise the
at-least-once, bounded-retry, dead-letter behaviour without AWS.
"""
import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional

from image_rekognition.core.models.queue import MessageState, QueueMessage
from image_rekognition.core.ports.message_queue import MessageQueuePort
from image_rekognition.infrastructure.logging.log_config import get_logger

logger = get_logger(__name__)


@dataclass
class _Entry:
    message: QueueMessage
    visible_at: float = 0.0


class InMemoryMessageQueue(MessageQueuePort):
    """
    Queue with a visibility timeout and an optional redrive policy.

    A received message is invisible until it is acknowledged, released, or
    visibility_timeout seconds pass. When a dead-letter queue is attached, a
    message that has already been received max_receive_count times is moved
    there on the next receive attempt and is never delivered by this queue
    again.
    """

    def __init__(
        self,
        name: str = "ImageQueue",
        visibility_timeout: float = 30.0,
        max_receive_count: int = 2,
        dead_letter_queue: Optional['InMemoryMessageQueue'] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        if visibility_timeout < 0:
            raise ValueError("Visibility timeout cannot be negative")
        if max_receive_count < 1:
            raise ValueError("max_receive_count must be at least 1")
        self.name = name
        self.visibility_timeout = visibility_timeout
        self.max_receive_count = max_receive_count
        self._clock = clock
        self._entries: "OrderedDict[str, _Entry]" = OrderedDict()
        self._lock = threading.Lock()
        self._dead_letter_queue: Optional['InMemoryMessageQueue'] = None
        self.dead_letter_queue = dead_letter_queue

    @property
    def dead_letter_queue(self) -> Optional['InMemoryMessageQueue']:
        return self._dead_letter_queue

    @dead_letter_queue.setter
    def dead_letter_queue(self, queue: Optional['InMemoryMessageQueue']) -> None:
        """
        Raises:
            ValueError: If the redrive chain would lead back to this queue
        """
        target = queue
        while target is not None:
            if target is self:
                raise ValueError(f"Queue '{self.name}' cannot be its own dead-letter queue")
            target = target.dead_letter_queue
        self._dead_letter_queue = queue

    def send(self, body: str) -> str:
        message_id = str(uuid.uuid4())
        with self._lock:
            self._entries[message_id] = _Entry(
                message=QueueMessage(message_id=message_id, body=body)
            )
        return message_id

    def receive(self, max_messages: int = 10) -> List[QueueMessage]:
        if max_messages < 1:
            raise ValueError("max_messages must be at least 1")

        received: List[QueueMessage] = []
        with self._lock:
            now = self._clock()
            for message_id in list(self._entries):
                if len(received) >= max_messages:
                    break
                entry = self._entries[message_id]
                if entry.visible_at > now:
                    continue

                if self._exceeds_receive_bound(entry.message):
                    self._move_to_dead_letter(message_id)
                    continue

                message = entry.message
                message.receive_count += 1
                message.receipt_handle = uuid.uuid4().hex
                message.state = MessageState.IN_FLIGHT
                entry.visible_at = now + self.visibility_timeout
                received.append(replace(message, attributes=dict(message.attributes)))
        return received

    def acknowledge(self, message: QueueMessage) -> None:
        with self._lock:
            entry = self._entries.get(message.message_id)
            if entry is None or entry.message.receipt_handle != message.receipt_handle:
                logger.warning("Ignoring acknowledge with stale receipt handle", extra={
                    "extra_fields": {"queue": self.name, "message_id": message.message_id}
                })
                return
            entry.message.state = MessageState.DELETED
            del self._entries[message.message_id]

    def release(self, message: QueueMessage) -> None:
        with self._lock:
            entry = self._entries.get(message.message_id)
            if entry is None or entry.message.receipt_handle != message.receipt_handle:
                return
            entry.message.state = MessageState.AVAILABLE
            entry.visible_at = self._clock()

    def _exceeds_receive_bound(self, message: QueueMessage) -> bool:
        return (
            self.dead_letter_queue is not None
            and message.receive_count >= self.max_receive_count
        )

    def _move_to_dead_letter(self, message_id: str) -> None:
        entry = self._entries.pop(message_id)
        message = entry.message
        message.state = MessageState.DEAD_LETTERED
        message.receipt_handle = None
        self.dead_letter_queue._accept_dead_letter(message)
        logger.error("Message moved to dead-letter queue", extra={
            "extra_fields": {
                "queue": self.name,
                "dead_letter_queue": self.dead_letter_queue.name,
                "message_id": message_id,
                "receive_count": message.receive_count
            }
        })

    def _accept_dead_letter(self, message: QueueMessage) -> None:
        with self._lock:
            self._entries[message.message_id] = _Entry(message=message)

    def messages(self) -> List[QueueMessage]:
        """Snapshot of every message held by this queue, visible or not."""
        with self._lock:
            return [replace(entry.message) for entry in self._entries.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def approximate_counts(self) -> Dict[str, int]:
        with self._lock:
            now = self._clock()
            in_flight = sum(1 for entry in self._entries.values() if entry.visible_at > now)
            return {
                "visible": len(self._entries) - in_flight,
                "in_flight": in_flight,
            }
