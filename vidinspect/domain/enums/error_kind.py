# vidinspect/domain/enums/error_kind.py
from __future__ import annotations

from enum import StrEnum


class PipelineErrorKind(StrEnum):
    file_not_found = "file_not_found"
    unsupported_or_corrupt = "unsupported_or_corrupt"
    probe_failed = "probe_failed"
    thumbnail_failed = "thumbnail_failed"
    hash_failed = "hash_failed"
    timeout = "timeout"
