# sailbridge/tool_router.py
import logging
import os
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from sailbridge.auth import get_store, require_token
from sailbridge.config import SCAN_DEPTH_CEILING, SCAN_ENTRIES_CEILING, ConfigStore
from sailbridge.errors import AccessDenied, InvalidRequest, NotADirectory, NotFound
from sailbridge.tools import env_info, is_forbidden_extension, is_within_allowed, normalize_path
from sailbridge.tools.files import read_bounded, scan_dir_tree

logger = logging.getLogger("bridge")

router = APIRouter(dependencies=[Depends(require_token)])


class ReadRequest(BaseModel):
    path: Optional[str] = None
    encoding: str = "utf-8"
    maxLines: Optional[int] = Field(None, ge=0)


@router.get("/env")
def env():
    return env_info()


@router.get("/project/scan")
def project_scan(
    path: Optional[str] = None,
    max_depth: Optional[int] = Query(None, alias="maxDepth", ge=1),
    max_entries: Optional[int] = Query(None, alias="maxEntries", ge=1),
    store: ConfigStore = Depends(get_store),
):
    config = store.snapshot()
    depth = min(max_depth or config.max_depth, SCAN_DEPTH_CEILING)
    entries = min(max_entries or config.max_entries, SCAN_ENTRIES_CEILING)

    resolved = normalize_path(path or config.active_project_root)
    if resolved is None:
        raise InvalidRequest("path is required")
    if not is_within_allowed(resolved, config.allowed_paths):
        raise AccessDenied("Path not allowed")
    if not os.path.exists(resolved):
        raise NotFound("Path not found")
    if not os.path.isdir(resolved):
        raise NotADirectory("Path is not a directory")

    result = scan_dir_tree(resolved, depth, entries, config.ignored_dirs)
    logger.info(f"[scan] {resolved}: {result.entries} entries (depth<={depth}, truncated={result.truncated})")
    return {
        "currentDir": resolved,
        "fileStructure": "\n".join(result.lines),
        "limits": {"maxDepth": depth, "maxEntries": entries},
    }


@router.post("/fs/read")
def fs_read(req: Optional[ReadRequest] = None, store: ConfigStore = Depends(get_store)):
    req = req or ReadRequest()
    config = store.snapshot()

    resolved = normalize_path(req.path)
    if resolved is None:
        raise InvalidRequest("File path is required")
    if not is_within_allowed(resolved, config.allowed_paths):
        raise AccessDenied("Path not allowed")
    if is_forbidden_extension(resolved, config.forbidden_extensions):
        raise AccessDenied("Forbidden file type")

    max_lines = config.max_read_lines if req.maxLines is None else req.maxLines
    result = read_bounded(resolved, config.max_file_size, max_lines, encoding=req.encoding)
    return {
        "success": True,
        "data": {
            "path": req.path,
            "content": result.content,
            "metadata": result.metadata(),
        },
    }
