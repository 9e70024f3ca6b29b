from __future__ import annotations

import secrets
import string
import time
from datetime import datetime, timezone
from typing import Sequence

from hireprep.schemas.prep import GenerationResult, Question
from hireprep.schemas.storage import LastInput, SavedHistory, SavedInput

from .backends import KeyValueStore
from .collections import KeyedCollection, SingletonSlot

SAVED_INPUTS_KEY = "hireprep_saved_inputs"
HISTORY_KEY = "hireprep_history"
LAST_INPUT_KEY = "hireprep_last_input"

_ID_ALPHABET = string.digits + string.ascii_lowercase


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_id() -> str:
    """Millisecond timestamp plus nine random base36 characters."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{int(time.time() * 1000)}-{suffix}"


def scoped_key(key: str, namespace: str) -> str:
    if not namespace or namespace == "default":
        return key
    return f"{namespace}:{key}"


class SavedInputCollection(KeyedCollection[SavedInput]):
    def save(self, resume: str, job_description: str, name: str | None = None) -> SavedInput:
        now = _utc_now()
        record = SavedInput(
            id=generate_id(),
            name=name or f"Saved {now.strftime('%Y-%m-%d')}",
            resume=resume,
            job_description=job_description,
            created_at=now,
        )
        return self.add(record)


class HistoryCollection(KeyedCollection[SavedHistory]):
    def save(
        self,
        resume: str,
        job_description: str,
        result: GenerationResult,
        name: str | None = None,
    ) -> SavedHistory:
        now = _utc_now()
        record = SavedHistory(
            id=generate_id(),
            name=name or f"Prep {now.strftime('%Y-%m-%d %H:%M:%S')}",
            resume=resume,
            job_description=job_description,
            result=result,
            created_at=now,
        )
        return self.add(record)

    def append_questions(self, record_id: str, questions: Sequence[Question]) -> SavedHistory | None:
        """Replace the record's result with one whose questions are old + new."""

        def _with_more(item: SavedHistory) -> SavedHistory:
            merged = item.result.model_copy(update={"questions": [*item.result.questions, *questions]})
            return item.model_copy(update={"result": merged})

        return self._replace(record_id, _with_more)


class PrepStore:
    """The three client collections, loaded from the backend on construction."""

    def __init__(self, backend: KeyValueStore, namespace: str = "default") -> None:
        self.namespace = namespace
        self.saved_inputs = SavedInputCollection(backend, scoped_key(SAVED_INPUTS_KEY, namespace), SavedInput)
        self.history = HistoryCollection(backend, scoped_key(HISTORY_KEY, namespace), SavedHistory)
        self.last_input = SingletonSlot(backend, scoped_key(LAST_INPUT_KEY, namespace), LastInput)

    def save_last_input(self, resume: str, job_description: str) -> LastInput:
        return self.last_input.set(LastInput(resume=resume, job_description=job_description))
