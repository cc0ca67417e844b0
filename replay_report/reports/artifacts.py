"""
Report artifact storage.

Replay captures are uploaded as a packaged clip and a metadata file,
both named after the replay id:

    reports/<guid>.zip
    reports/<guid>.json
"""

import logging
from pathlib import Path
from typing import Tuple, Union
from uuid import UUID

from ..audit.models import Replay

logger = logging.getLogger(__name__)

ReplayId = Union[UUID, str]


class ArtifactStore:
    """Locates (and for metadata, writes) report artifacts on disk."""

    CLIP_SUFFIX = ".zip"
    METADATA_SUFFIX = ".json"

    def __init__(self, root: Union[str, Path] = "reports"):
        self.root = Path(root)

    def ensure(self) -> Path:
        """Create the artifact directory if it does not exist yet."""
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def clip_path(self, replay_id: ReplayId) -> Path:
        return self.root / f"{replay_id}{self.CLIP_SUFFIX}"

    def metadata_path(self, replay_id: ReplayId) -> Path:
        return self.root / f"{replay_id}{self.METADATA_SUFFIX}"

    def attachments(self, replay_id: ReplayId) -> Tuple[Path, Path]:
        """Clip and metadata paths, in the order they are attached."""
        return self.clip_path(replay_id), self.metadata_path(replay_id)

    def has_artifacts(self, replay_id: ReplayId) -> bool:
        return all(path.is_file() for path in self.attachments(replay_id))

    def write_metadata(self, replay: Replay) -> Path:
        """Write the replay's audit log as its metadata file."""
        self.ensure()
        path = self.metadata_path(replay.guid)
        path.write_text(replay.audit_log.to_json(), encoding="utf-8")
        logger.debug(f"Wrote replay metadata {path}")
        return path
