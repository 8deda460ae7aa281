# vidinspect/domain/errors.py
from __future__ import annotations

from typing import Optional

from vidinspect.domain.enums.error_kind import PipelineErrorKind
from vidinspect.domain.enums.stage import Stage


class PipelineError(Exception):
    """
    Per-file failure of one inspection stage.

    Every stage-local problem (tool exit codes, parser internals, read errors)
    is converted to exactly one subclass before it reaches the orchestrator
    boundary. `message` is safe to show to a user; `detail` is the raw context.
    """
    kind: PipelineErrorKind

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail
        super().__init__(self.message)

    @property
    def title(self) -> str:
        return "Inspection failed"

    @property
    def message(self) -> str:
        return f"{self.title}: {self.detail}" if self.detail else self.title


class SourceNotFoundError(PipelineError):
    kind = PipelineErrorKind.file_not_found

    @property
    def title(self) -> str:
        return "File not found or not readable"


class UnsupportedMediaError(PipelineError):
    kind = PipelineErrorKind.unsupported_or_corrupt

    @property
    def title(self) -> str:
        return "Unsupported or corrupt video file"


class ProbeFailedError(PipelineError):
    kind = PipelineErrorKind.probe_failed

    @property
    def title(self) -> str:
        return "Could not read video metadata"


class ThumbnailFailedError(PipelineError):
    kind = PipelineErrorKind.thumbnail_failed

    @property
    def title(self) -> str:
        return "Could not generate thumbnails"


class HashFailedError(PipelineError):
    kind = PipelineErrorKind.hash_failed

    @property
    def title(self) -> str:
        return "Could not hash file contents"


class StageTimeoutError(PipelineError):
    kind = PipelineErrorKind.timeout

    def __init__(self, stage: Stage, detail: Optional[str] = None) -> None:
        self.stage = Stage(stage)
        super().__init__(detail)

    @property
    def title(self) -> str:
        return f"Timed out during {self.stage.value}"


class InspectionCancelled(Exception):
    """Raised to the caller when an in-flight inspection is aborted."""


class ToolUnavailableError(RuntimeError):
    """
    A bundled media tool is missing or not executable. Session-level: checked
    once at startup, never reported per file and not fixed by retrying.
    """

    def __init__(self, tool: str, searched: Optional[list] = None) -> None:
        self.tool = tool
        self.searched = list(searched or [])
        where = ", ".join(str(p) for p in self.searched) or "<no candidates>"
        super().__init__(f"{tool} not available (looked in: {where})")
