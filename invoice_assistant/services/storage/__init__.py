from .record_store import record_store

__all__ = ["record_store"]
