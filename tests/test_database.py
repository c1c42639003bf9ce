import threading
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from database import SubmissionStore
from schemas import validate_submission


@pytest.fixture
def submission(payload):
    return validate_submission(payload)[0]


class FakeClock:
    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


def test_save_assigns_id_and_timestamp(submission):
    store = SubmissionStore()
    stored = store.save(submission)
    assert len(stored.id) == 36
    assert stored.submitted_at.tzinfo is not None
    assert stored.full_name == "Jane Doe"
    assert store.get_by_id(stored.id) == stored


def test_ids_are_unique(submission):
    store = SubmissionStore()
    ids = {store.save(submission).id for _ in range(20)}
    assert len(ids) == 20


def test_list_is_newest_first(submission):
    store = SubmissionStore(clock=FakeClock())
    first = store.save(submission)
    second = store.save(submission.model_copy(update={"full_name": "John Roe"}))
    assert [s.id for s in store.list()] == [second.id, first.id]


def test_get_unknown_id(submission):
    store = SubmissionStore()
    store.save(submission)
    assert store.get_by_id("missing") is None
    assert SubmissionStore().list() == []


def test_stored_submission_is_immutable(submission):
    stored = SubmissionStore().save(submission)
    with pytest.raises(ValidationError):
        stored.full_name = "Changed"


def test_concurrent_saves_are_not_lost(submission):
    store = SubmissionStore()

    def worker():
        for _ in range(25):
            store.save(submission)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(store) == 200
    assert len(store.list()) == 200
