"""Data access for the flattened record-store views."""

from .record_store import RecordStore, frame_to_rows

__all__ = ["RecordStore", "frame_to_rows"]
