"""
In-memory extraction sessions (for demo purposes).

A session is one user's upload queue plus the state of its last extraction
run. Nothing is persisted; a restart drops every session.
"""
from datetime import datetime, UTC
from enum import Enum
from typing import Dict, List, Optional
import uuid

from ..errors import ExtractionInProgressError
from ..table_types import ImageInput


class AppStatus(str, Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class ExtractionSession:
    def __init__(self, session_id: str):
        self.id = session_id
        self.files: List[ImageInput] = []
        self.status = AppStatus.IDLE
        self.markdown_result = ""
        self.error_message = ""
        self.created_at = datetime.now(UTC).isoformat()

    @property
    def can_analyze(self) -> bool:
        return bool(self.files) and self.status != AppStatus.LOADING

    def ensure_not_loading(self) -> None:
        """The queue is frozen while a run is in flight"""
        if self.status == AppStatus.LOADING:
            raise ExtractionInProgressError("An extraction is already running for this session")

    def add_files(self, images: List[ImageInput]) -> None:
        """Queue more images; any previous result no longer matches the queue"""
        self.ensure_not_loading()
        if not images:
            return
        self.files.extend(images)
        self.status = AppStatus.IDLE
        self.markdown_result = ""
        self.error_message = ""

    def remove_file(self, index: int) -> ImageInput:
        self.ensure_not_loading()
        if index < 0 or index >= len(self.files):
            raise IndexError(f"No file at index {index}")
        # Removing the last queued file clears the result shown for it
        if len(self.files) <= 1:
            self.markdown_result = ""
        return self.files.pop(index)

    def reset(self) -> None:
        self.ensure_not_loading()
        self.files = []
        self.status = AppStatus.IDLE
        self.markdown_result = ""
        self.error_message = ""

    # Transitions: IDLE -> LOADING -> SUCCESS | ERROR -> IDLE (on new files/reset)

    def start_loading(self) -> None:
        self.status = AppStatus.LOADING
        self.error_message = ""

    def succeed(self, markdown: str) -> None:
        self.markdown_result = markdown
        self.status = AppStatus.SUCCESS

    def fail(self, message: str) -> None:
        self.error_message = message
        self.status = AppStatus.ERROR

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "status": self.status.value,
            "files": [
                {"index": i, "filename": f.filename, "mime_type": f.mime_type, "size": f.size}
                for i, f in enumerate(self.files)
            ],
            "markdown_result": self.markdown_result,
            "error_message": self.error_message,
            "created_at": self.created_at,
        }


class SessionStore:
    def __init__(self):
        self._sessions: Dict[str, ExtractionSession] = {}

    def create(self) -> ExtractionSession:
        session = ExtractionSession(str(uuid.uuid4()))
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> Optional[ExtractionSession]:
        return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def list_all(self) -> list:
        """List all sessions (for debugging)"""
        return [s.to_dict() for s in self._sessions.values()]

    def clear(self) -> None:
        self._sessions.clear()


# Global instance (in production, use dependency injection)
session_store = SessionStore()
