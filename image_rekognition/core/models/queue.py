"""
Queue message domain entities.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional


class MessageState(str, Enum):
    """Lifecycle of a queued notification."""
    AVAILABLE = "available"
    IN_FLIGHT = "in_flight"
    DEAD_LETTERED = "dead_lettered"
    DELETED = "deleted"


@dataclass
class QueueMessage:
    """
    A notification about a new image object.

    receipt_handle identifies one specific receive of the message; it changes
    on every redelivery and is required to acknowledge or release it.
    """
    message_id: str
    body: str
    receive_count: int = 0
    receipt_handle: Optional[str] = None
    state: MessageState = MessageState.AVAILABLE
    attributes: Dict[str, Any] = field(default_factory=dict)
