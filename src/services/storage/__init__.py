from .sessions import AppStatus, ExtractionSession, SessionStore, session_store

__all__ = ["AppStatus", "ExtractionSession", "SessionStore", "session_store"]
