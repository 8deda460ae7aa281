# vidinspect/services/tools/locator.py
from __future__ import annotations

import os
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from vidinspect.common.logging import get_logger
from vidinspect.common.settings import ToolsConfig, get_settings
from vidinspect.domain.errors import ToolUnavailableError

logger = get_logger(__name__)

FFPROBE = "ffprobe"
FFMPEG = "ffmpeg"

_TRIPLES = {
    ("darwin", "x86_64"): "x86_64-apple-darwin",
    ("darwin", "arm64"): "aarch64-apple-darwin",
    ("darwin", "aarch64"): "aarch64-apple-darwin",
    ("windows", "amd64"): "x86_64-pc-windows-msvc",
    ("windows", "x86_64"): "x86_64-pc-windows-msvc",
    ("windows", "arm64"): "aarch64-pc-windows-msvc",
    ("linux", "x86_64"): "x86_64-unknown-linux-gnu",
    ("linux", "amd64"): "x86_64-unknown-linux-gnu",
    ("linux", "aarch64"): "aarch64-unknown-linux-gnu",
    ("linux", "arm64"): "aarch64-unknown-linux-gnu",
}


def target_triple(system: Optional[str] = None, machine: Optional[str] = None) -> Optional[str]:
    """Map the running platform to the sidecar naming used for bundled binaries."""
    system = (system or platform.system()).lower()
    machine = (machine or platform.machine()).lower()
    return _TRIPLES.get((system, machine))


@dataclass(frozen=True)
class MediaTools:
    ffprobe: Path
    ffmpeg: Path


def _is_executable(p: Path) -> bool:
    return p.is_file() and os.access(p, os.X_OK)


def candidate_paths(tool: str, bin_dir: Path, override: Optional[Path] = None,
                    system: Optional[str] = None, machine: Optional[str] = None) -> List[Path]:
    if override:
        return [Path(override).expanduser()]
    is_windows = (system or platform.system()).lower() == "windows"
    suffix = ".exe" if is_windows else ""
    bin_dir = Path(bin_dir).expanduser()
    out: List[Path] = []
    triple = target_triple(system, machine)
    if triple:
        out.append(bin_dir / f"{tool}-{triple}{suffix}")
    out.append(bin_dir / f"{tool}{suffix}")
    return out


def resolve_tool(tool: str, cfg: Optional[ToolsConfig] = None) -> Path:
    """
    Resolve one bundled tool. The ambient PATH is deliberately not consulted so
    the version shipped with the app is the one that runs.
    """
    cfg = cfg or get_settings().tools
    override = cfg.ffprobe_bin if tool == FFPROBE else cfg.ffmpeg_bin if tool == FFMPEG else None
    searched = candidate_paths(tool, cfg.bin_dir, override)
    for p in searched:
        if _is_executable(p):
            return p.resolve()
    raise ToolUnavailableError(tool, searched)


def locate_tools(cfg: Optional[ToolsConfig] = None) -> MediaTools:
    """Startup precondition: both tools present. Raises ToolUnavailableError otherwise."""
    tools = MediaTools(ffprobe=resolve_tool(FFPROBE, cfg), ffmpeg=resolve_tool(FFMPEG, cfg))
    logger.info("media tools: ffprobe=%s ffmpeg=%s", tools.ffprobe, tools.ffmpeg)
    return tools
