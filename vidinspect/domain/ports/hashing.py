from __future__ import annotations
import threading
from pathlib import Path
from typing import Optional, Protocol

class HashingPort(Protocol):
    def sha256_file(
        self,
        path: Path,
        *,
        deadline: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> str: ...
