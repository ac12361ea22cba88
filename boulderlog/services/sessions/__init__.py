from boulderlog.services.sessions.snapshot_service import SnapshotService

__all__ = ["SnapshotService"]
