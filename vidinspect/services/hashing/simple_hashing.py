from __future__ import annotations

import hashlib
import threading
import time
from pathlib import Path
from typing import Optional

from vidinspect.common.settings import get_settings
from vidinspect.domain.enums.stage import Stage
from vidinspect.domain.errors import HashFailedError, InspectionCancelled, StageTimeoutError
from vidinspect.domain.ports.hashing import HashingPort


class SimpleHashing(HashingPort):
    """
    Streaming SHA-256 file hasher. Memory is bounded by chunk_size regardless
    of file size; a digest object lives for exactly one file pass.
    """

    def __init__(self, chunk_size: Optional[int] = None) -> None:
        self.chunk_size = int(chunk_size or get_settings().hashing.chunk_size)

    def sha256_file(
        self,
        path: Path,
        *,
        deadline: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> str:
        """
        `deadline` is a time.monotonic() value checked between chunks.
        Any read error yields HashFailedError; partial digests never escape.
        """
        path = Path(path)
        h = hashlib.sha256()
        try:
            with path.open("rb") as f:
                for chunk in iter(lambda: f.read(self.chunk_size), b""):
                    h.update(chunk)
                    if cancel_event is not None and cancel_event.is_set():
                        raise InspectionCancelled(str(path))
                    if deadline is not None and time.monotonic() > deadline:
                        raise StageTimeoutError(Stage.hash, f"hashing {path.name} exceeded its time budget")
        except OSError as e:
            raise HashFailedError(f"{type(e).__name__}: {e}") from e
        return h.hexdigest()
