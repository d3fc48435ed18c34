"""Client-side state of one visitor's pass through the intake wizard."""
from __future__ import annotations

import logging
import random
import string
import time
from typing import Any, Callable, Optional, Union

from intake_client.store import (
    QUOTA_EXCEEDED,
    SAVE_ERROR,
    DraftStore,
    QuotaExceededError,
    StorageBackend,
    StorageErrorEvent,
)
from services.resume import resume_path, resume_step_index

logger = logging.getLogger(__name__)

FORM_DATA_KEY = "notaryFormData"
SESSION_ID_KEY = "formSessionId"

_BASE36 = string.digits + string.ascii_lowercase


def initial_form_data() -> dict[str, Any]:
    return {
        "firstName": "",
        "lastName": "",
        "email": "",
        "phone": "",
        "address": "",
        "city": "",
        "postalCode": "",
        "country": "",
        "timezone": "",
        "notes": "",
        "selectedServices": [],
        "serviceDocuments": {},
        "deliveryMethod": None,
        "signatories": [],
        "isSignatory": False,
        "currency": "EUR",
    }


def new_session_id(now: Optional[float] = None, rng: Optional[random.Random] = None) -> str:
    """`session_<epoch millis>_<9 base36 chars>`"""
    millis = int((time.time() if now is None else now) * 1000)
    rng = rng or random.Random()
    suffix = "".join(rng.choice(_BASE36) for _ in range(9))
    return f"session_{millis}_{suffix}"


class FormDraftSession:
    """
    The draft form data and the session id that correlates its server saves.

    Both live in the same storage backend. The session id is created on first
    use and kept until clear() is called after a successful payment.
    """

    def __init__(
        self,
        backend: StorageBackend,
        on_error: Optional[Callable[[StorageErrorEvent], None]] = None,
        protection_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.backend = backend
        self._on_error = on_error
        self._session_id: Optional[str] = None
        self._store: DraftStore[dict[str, Any]] = DraftStore(
            FORM_DATA_KEY,
            initial_form_data(),
            backend,
            on_error=on_error,
            protection_seconds=protection_seconds,
            clock=clock,
        )

    @property
    def form_data(self) -> dict[str, Any]:
        return self._store.value

    @property
    def session_id(self) -> str:
        if self._session_id is None:
            try:
                stored = self.backend.get_item(SESSION_ID_KEY)
            except OSError as e:
                self._report(e)
                stored = None
            if stored:
                self._session_id = stored
            else:
                self._session_id = new_session_id()
                try:
                    self.backend.set_item(SESSION_ID_KEY, self._session_id)
                except Exception as e:
                    # Keep the in-memory id; saves still correlate this run
                    self._report(e)
        return self._session_id

    def update(
        self, changes: Union[dict[str, Any], Callable[[dict[str, Any]], dict[str, Any]]]
    ) -> Optional[StorageErrorEvent]:
        """Merge `changes` (or the result of calling it on the current data)."""
        def merge(prev: dict[str, Any]) -> dict[str, Any]:
            patch = changes(prev) if callable(changes) else changes
            return {**prev, **patch}

        return self._store.set(merge)

    def subscribe(self, on_change: Callable[[dict[str, Any]], None]) -> Callable[[], None]:
        return self._store.subscribe(on_change)

    def resume_step_index(self) -> int:
        return resume_step_index(self.form_data)

    def resume_path(self, query: str = "") -> str:
        return resume_path(self.form_data, query)

    def clear(self) -> None:
        """Forget the draft and its session, e.g. after payment succeeded."""
        self._store.reset()
        try:
            self.backend.remove_item(SESSION_ID_KEY)
        except OSError as e:
            self._report(e)
        self._session_id = None

    def _report(self, error: Exception) -> None:
        logger.warning("Session id storage failed: %s", error)
        if self._on_error is not None:
            kind = QUOTA_EXCEEDED if isinstance(error, QuotaExceededError) else SAVE_ERROR
            self._on_error(StorageErrorEvent(kind, str(error), SESSION_ID_KEY))

    def close(self) -> None:
        self._store.close()
