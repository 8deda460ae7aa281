# vidinspect/services/api/routers/inspect.py
from __future__ import annotations
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException

from vidinspect.common.settings import get_settings
from vidinspect.domain.errors import ToolUnavailableError
from vidinspect.services.api.deps import get_inspector_dep
from vidinspect.services.inspect.service import Inspector
from vidinspect.services.mappers.inspection import to_inspection_schema
from vidinspect.services.schemas.inspection import InspectRequest, InspectionResultSchema

cfg = get_settings()
router = APIRouter(prefix=f"{cfg.api.prefix}", tags=["inspect"])


@router.post("/inspect", response_model=InspectionResultSchema)
async def inspect_file(
    req: InspectRequest,
    inspector: Inspector = Depends(get_inspector_dep),
) -> InspectionResultSchema:
    """
    Per-file failures come back as 200 with `error` set; the client renders
    exactly one of a full result or an error banner. A tool that can no longer
    be launched is a 503, same as one missing at startup.
    """
    try:
        result = await inspector.ainspect(req.path)
    except ToolUnavailableError as e:
        raise HTTPException(status_code=HTTPStatus.SERVICE_UNAVAILABLE, detail=str(e)) from e
    return to_inspection_schema(result)
