"""Client-side pieces of the intake form: draft persistence and API calls."""
from intake_client.api import IntakeApiClient
from intake_client.session import FormDraftSession, new_session_id
from intake_client.store import (
    DraftStore,
    FileStorage,
    MemoryStorage,
    StorageErrorEvent,
    read_json,
    subscribe,
    write_json,
)

__all__ = [
    "DraftStore",
    "FileStorage",
    "FormDraftSession",
    "IntakeApiClient",
    "MemoryStorage",
    "StorageErrorEvent",
    "new_session_id",
    "read_json",
    "subscribe",
    "write_json",
]
