# vidinspect/services/api/deps.py
from __future__ import annotations
from http import HTTPStatus

from fastapi import HTTPException

from vidinspect.domain.errors import ToolUnavailableError
from vidinspect.services.inspect.service import Inspector, get_inspector


def get_inspector_dep() -> Inspector:
    """
    Provide the process-wide Inspector via DI. Missing media tools are a
    session-level condition, so they surface as 503 rather than a per-file error.
    """
    try:
        return get_inspector()
    except ToolUnavailableError as e:
        raise HTTPException(status_code=HTTPStatus.SERVICE_UNAVAILABLE, detail=str(e)) from e
