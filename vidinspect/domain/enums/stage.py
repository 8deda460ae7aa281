# vidinspect/domain/enums/stage.py
from __future__ import annotations

from enum import StrEnum


class Stage(StrEnum):
    validate = "validate"
    probe = "probe"
    thumbnails = "thumbnails"
    hash = "hash"
    assemble = "assemble"
