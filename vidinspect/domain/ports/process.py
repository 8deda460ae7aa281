from __future__ import annotations
import threading
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence


@dataclass(frozen=True)
class ProcessResult:
    argv: tuple
    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def stderr_text(self, limit: int = 2000) -> str:
        return self.stderr.decode("utf-8", "replace").strip()[-limit:]


class ProcessRunnerPort(Protocol):
    def run(
        self,
        argv: Sequence[str],
        *,
        timeout_sec: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> ProcessResult: ...
