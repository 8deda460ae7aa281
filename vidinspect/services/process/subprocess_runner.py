# vidinspect/services/process/subprocess_runner.py
from __future__ import annotations

import shlex
import subprocess
import threading
import time
from typing import Optional, Sequence

from vidinspect.common.logging import get_logger
from vidinspect.common.settings import get_settings
from vidinspect.domain.ports.process import ProcessResult, ProcessRunnerPort

logger = get_logger(__name__)

# how long to wait for a killed child to be reaped before falling back to wait()
_REAP_TIMEOUT_SEC = 5.0


class ProcessError(RuntimeError):
    """Base class for failures where no usable exit status exists."""

    def __init__(self, argv: Sequence[str], message: str) -> None:
        self.argv = tuple(argv)
        super().__init__(message)


class ProcessLaunchError(ProcessError):
    def __init__(self, argv: Sequence[str], reason: str) -> None:
        super().__init__(argv, f"failed to launch {argv[0] if argv else '<empty>'}: {reason}")


class ProcessTimeout(ProcessError):
    def __init__(self, argv: Sequence[str], timeout_sec: float, pid: int, returncode: Optional[int]) -> None:
        self.timeout_sec = timeout_sec
        self.pid = pid
        self.returncode = returncode
        super().__init__(argv, f"{argv[0]} exceeded {timeout_sec:g}s and was killed")


class ProcessCancelled(ProcessError):
    def __init__(self, argv: Sequence[str], pid: int, returncode: Optional[int]) -> None:
        self.pid = pid
        self.returncode = returncode
        super().__init__(argv, f"{argv[0]} cancelled by caller")


class SubprocessRunner(ProcessRunnerPort):
    """
    Runs one fresh child process per call and captures stdout/stderr as bytes.

    A non-zero exit is returned, not raised; callers decide per stage what it
    means. Timeout and cancellation kill and reap the child before raising, so
    no process outlives the call. Holds no per-call state: one instance can be
    shared by concurrent inspections.
    """

    def __init__(self, poll_interval_sec: Optional[float] = None) -> None:
        cfg = get_settings()
        self.poll_interval_sec = float(poll_interval_sec or cfg.timeouts.poll_interval_sec)

    def run(
        self,
        argv: Sequence[str],
        *,
        timeout_sec: float,
        cancel_event: Optional[threading.Event] = None,
    ) -> ProcessResult:
        argv = tuple(str(a) for a in argv)
        logger.debug("exec: %s", " ".join(shlex.quote(a) for a in argv))

        try:
            proc = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise ProcessLaunchError(argv, str(e)) from e

        deadline = time.monotonic() + timeout_sec
        aborted: Optional[str] = None
        try:
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    aborted = "cancelled"
                    break
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    aborted = "timeout"
                    break
                try:
                    # communicate() may be re-entered after TimeoutExpired without losing output
                    stdout, stderr = proc.communicate(timeout=min(self.poll_interval_sec, remaining))
                    break
                except subprocess.TimeoutExpired:
                    continue
        except BaseException:
            self._kill(proc)
            raise

        if aborted == "cancelled":
            self._kill(proc)
            raise ProcessCancelled(argv, proc.pid, proc.returncode)
        if aborted == "timeout":
            self._kill(proc)
            logger.warning("%s timed out after %.1fs (pid=%s killed)", argv[0], timeout_sec, proc.pid)
            raise ProcessTimeout(argv, timeout_sec, proc.pid, proc.returncode)

        logger.debug("%s exited rc=%s (%d bytes out)", argv[0], proc.returncode, len(stdout or b""))
        return ProcessResult(argv=argv, returncode=proc.returncode, stdout=stdout or b"", stderr=stderr or b"")

    @staticmethod
    def _kill(proc: subprocess.Popen) -> None:
        if proc.poll() is None:
            proc.kill()
        try:
            proc.communicate(timeout=_REAP_TIMEOUT_SEC)
        except (subprocess.TimeoutExpired, ValueError):
            proc.wait()
