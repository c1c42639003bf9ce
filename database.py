"""
In-memory submission store.

Stands in for a real database: entries live for the lifetime of the process.
Routes only talk to it through save / list / get_by_id, so a persistent
implementation can be dropped in via the ``get_store`` dependency.
"""
import threading
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from fastapi import Request

from schemas import StoredSubmission, SubmissionWithImage


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubmissionStore:
    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._clock = clock
        self._submissions: Dict[str, StoredSubmission] = {}
        self._lock = threading.Lock()

    def save(self, submission: SubmissionWithImage) -> StoredSubmission:
        stored = StoredSubmission(
            **submission.model_dump(),
            id=str(uuid.uuid4()),
            submitted_at=self._clock(),
        )
        with self._lock:
            self._submissions[stored.id] = stored
        return stored

    def list(self) -> List[StoredSubmission]:
        """All submissions, most recent first."""
        with self._lock:
            items = list(self._submissions.values())
        return sorted(items, key=lambda s: s.submitted_at, reverse=True)

    def get_by_id(self, submission_id: str) -> Optional[StoredSubmission]:
        with self._lock:
            return self._submissions.get(submission_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._submissions)


def get_store(request: Request) -> SubmissionStore:
    return request.app.state.store
