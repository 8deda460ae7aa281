from __future__ import annotations
import threading
from pathlib import Path
from typing import Optional, Protocol
from vidinspect.domain.entities.probe import MediaStreamInfo

class MediaProbePort(Protocol):
    def probe(self, path: Path, *, cancel_event: Optional[threading.Event] = None) -> MediaStreamInfo: ...
