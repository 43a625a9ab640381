"""Persistence collaborators for serialized journey contexts."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Protocol


class ContextStore(Protocol):
    """Session-side storage the runtime loads from and saves to."""

    def load(self, session_id: str) -> dict[str, Any] | None: ...

    def save(self, session_id: str, blob: dict[str, Any]) -> None: ...


@dataclass
class InMemoryContextStore:
    """Keeps JSON-encoded context blobs per session, written verbatim."""

    sessions: dict[str, str] = field(default_factory=dict)
    saves: int = 0

    def load(self, session_id: str) -> dict[str, Any] | None:
        raw = self.sessions.get(session_id)
        if raw is None:
            return None
        return json.loads(raw)

    def save(self, session_id: str, blob: dict[str, Any]) -> None:
        self.sessions[session_id] = json.dumps(blob, sort_keys=True)
        self.saves += 1

    def discard(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)
