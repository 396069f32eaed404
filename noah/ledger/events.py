"""
Ledger Event Log
================

Append-only, in-memory log of the events emitted by successful state
transitions, with mock transaction hashes and block numbers.

Version: 0.1.0
"""

import hashlib
import uuid
from typing import Any

from noah.ledger.models import LedgerEvent, LedgerEventType
from noah.logging import get_logger


logger = get_logger(__name__)

GENESIS_BLOCK = 1000


class EventLog:
    """Sequential event log; each emitted event occupies its own block."""

    def __init__(self) -> None:
        self._events: list[LedgerEvent] = []
        self._block_number = GENESIS_BLOCK

    @property
    def block_number(self) -> int:
        return self._block_number

    def _generate_tx_hash(self) -> str:
        """Generate a mock transaction hash."""
        return "0x" + hashlib.sha256(uuid.uuid4().bytes).hexdigest()

    def _next_block(self) -> int:
        """Get next block number."""
        self._block_number += 1
        return self._block_number

    def emit(self, event_type: LedgerEventType, **payload: Any) -> LedgerEvent:
        """Record an event."""
        event = LedgerEvent(
            event_type=event_type,
            tx_hash=self._generate_tx_hash(),
            block_number=self._next_block(),
            payload=payload,
        )
        self._events.append(event)

        logger.debug(
            "ledger_event_emitted",
            event_type=event_type.value,
            tx_hash=event.tx_hash,
            block_number=event.block_number,
        )

        return event

    def events(
        self,
        event_type: LedgerEventType | None = None,
        limit: int | None = None,
    ) -> list[LedgerEvent]:
        """
        Events in emission order, optionally filtered by type.

        Args:
            event_type: Only return events of this type
            limit: Return at most the last ``limit`` matching events
        """
        selected = [e for e in self._events if event_type is None or e.event_type == event_type]
        if limit is not None:
            selected = selected[-limit:] if limit > 0 else []
        return selected

    def __len__(self) -> int:
        return len(self._events)

    def clear(self) -> None:
        """Drop all events (for testing)."""
        self._events.clear()
        self._block_number = GENESIS_BLOCK
