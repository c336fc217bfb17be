"""Audio artifact storage.

Responsibilities:
- Persist final podcast audio under collision-resistant names.
- Map stored names to public references a downstream player can fetch.
- Provide scratch space for intermediate segment clips.
"""

from __future__ import annotations

from itertools import count
import json
import os
from pathlib import Path
from threading import Lock
import time


_name_counter = count()
_name_lock = Lock()


def unique_artifact_name(prefix: str = "podcast", suffix: str = ".mp3") -> str:
    """Return `<prefix>_<epoch-ms>_<n><suffix>`, unique within this process.

    The counter disambiguates requests that start within the same clock tick.
    """

    with _name_lock:
        sequence = next(_name_counter)
    return f"{prefix}_{int(time.time() * 1000)}_{sequence}{suffix}"


class ArtifactStore:
    """Filesystem-backed store for served audio artifacts."""

    _SCRATCH_DIR_NAME = ".segments"

    def __init__(self, root: Path, public_prefix: str = "/audio") -> None:
        """Initialize the store with a root directory and public URL prefix."""

        self.root = root
        self.public_prefix = public_prefix.rstrip("/")

    def public_ref(self, name: str) -> str:
        """Return the public reference for a stored artifact name."""

        return f"{self.public_prefix}/{name}"

    def path_for(self, name: str) -> Path:
        """Return the filesystem path for an artifact name."""

        if not name or Path(name).name != name:
            raise ValueError(f"Artifact name must be a plain file name, got `{name}`.")
        return self.root / name

    def write(self, data: bytes, name: str) -> str:
        """Save bytes under `name` and return the public reference."""

        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return self.public_ref(name)

    def adopt(self, source: Path, name: str) -> str:
        """Move an existing file into the store under `name`."""

        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        os.replace(source, path)
        return self.public_ref(name)

    def delete(self, name: str) -> None:
        """Delete a stored artifact; missing artifacts are ignored."""

        self.path_for(name).unlink(missing_ok=True)

    def exists(self, name: str) -> bool:
        """Return whether the given artifact exists."""

        return self.path_for(name).exists()

    def save_json(self, name: str, payload: dict[str, object]) -> Path:
        """Save a JSON-serializable payload beside the audio artifacts."""

        path = self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True),
            encoding="utf-8",
        )
        return path

    def scratch_dir(self, token: str) -> Path:
        """Return a request-scoped directory for intermediate clips."""

        return self.root / self._SCRATCH_DIR_NAME / token
