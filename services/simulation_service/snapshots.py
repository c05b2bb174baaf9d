"""
School Snapshots

Saves and restores the complete world state (every entity set and the day
counter) as JSON. A checksum of the serialized school guards against
edited or truncated files.
"""

import hashlib
import json
from datetime import datetime
from pathlib import Path

import pydantic
import structlog
from pydantic import BaseModel, Field

from shared.domain.exceptions import SnapshotError
from shared.domain.school import School

logger = structlog.get_logger(__name__)

SCHEMA_VERSION = 1


def _checksum(school: School) -> str:
    return hashlib.sha256(school.model_dump_json().encode("utf-8")).hexdigest()


class SchoolSnapshot(BaseModel):
    """Persisted school state."""

    schema_version: int = Field(default=SCHEMA_VERSION)
    saved_at: datetime = Field(default_factory=datetime.utcnow)
    checksum: str | None = Field(default=None, description="SHA-256 of the serialized school")
    school: School

    @classmethod
    def capture(cls, school: School) -> "SchoolSnapshot":
        return cls(school=school, checksum=_checksum(school))

    def verify(self) -> bool:
        """Check the stored checksum against the school it describes."""
        return self.checksum is None or self.checksum == _checksum(self.school)


def save_snapshot(school: School, path: str | Path) -> Path:
    """
    Write a snapshot of the school.

    Args:
        school: School to save
        path: Target file; parent directories are created

    Returns:
        Path: The written file

    Raises:
        SnapshotError: If the file cannot be written
    """
    path = Path(path)
    snapshot = SchoolSnapshot.capture(school)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(snapshot.model_dump_json(indent=2))
    except OSError as e:
        raise SnapshotError(f"Cannot write snapshot: {e}", path=str(path), cause=e) from e

    logger.info("Snapshot saved", path=str(path), school=school.name, day=school.days_running)
    return path


def load_snapshot(path: str | Path) -> School:
    """
    Restore a school from a snapshot.

    The restored school starts with an empty event journal.

    Raises:
        SnapshotError: If the file is missing, malformed, from an unknown
            schema version, or fails its checksum
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = f.read()
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot: {e}", path=str(path), cause=e) from e

    try:
        version = json.loads(raw).get("schema_version")
    except (json.JSONDecodeError, AttributeError) as e:
        raise SnapshotError("Snapshot is not a JSON object", path=str(path), cause=e) from e
    if version != SCHEMA_VERSION:
        raise SnapshotError(f"Unsupported snapshot schema version: {version}", path=str(path))

    try:
        snapshot = SchoolSnapshot.model_validate_json(raw)
    except pydantic.ValidationError as e:
        raise SnapshotError(f"Invalid snapshot: {e.error_count()} error(s)", path=str(path), cause=e) from e

    if not snapshot.verify():
        raise SnapshotError("Snapshot checksum mismatch", path=str(path))

    logger.info(
        "Snapshot loaded",
        path=str(path),
        school=snapshot.school.name,
        day=snapshot.school.days_running,
    )
    return snapshot.school
