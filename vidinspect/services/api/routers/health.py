# vidinspect/services/api/routers/health.py
from __future__ import annotations
from fastapi import APIRouter
from vidinspect.common.settings import get_settings
from vidinspect.domain.errors import ToolUnavailableError
from vidinspect.services.schemas.inspection import ToolStatus
from vidinspect.services.tools.locator import locate_tools

router = APIRouter()

@router.get("/healthz")
def healthz():
    s = get_settings()
    try:
        tools = locate_tools(s.tools)
        status = ToolStatus(available=True, ffprobe=str(tools.ffprobe), ffmpeg=str(tools.ffmpeg))
    except ToolUnavailableError as e:
        status = ToolStatus(available=False, error=str(e))
    return {
        "ok": status.available,
        "app": s.app_name,
        "env": s.app_env,
        "tools": status.model_dump(),
    }
