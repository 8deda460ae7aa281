from __future__ import annotations

import threading
from pathlib import Path
from typing import List, Optional, Protocol
from vidinspect.domain.entities.thumbnail import ThumbnailImage


class ThumbnailsPort(Protocol):
    def generate(
        self,
        video_path: Path,
        duration_sec: float,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[ThumbnailImage]: ...
