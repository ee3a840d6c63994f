# sailbridge/config_routes.py
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from sailbridge.auth import get_store, require_token
from sailbridge.config import ConfigStore

router = APIRouter(prefix="/config", dependencies=[Depends(require_token)])


class AllowedPathsRequest(BaseModel):
    action: Optional[str] = None
    path: Optional[str] = None


@router.get("")
def get_config(store: ConfigStore = Depends(get_store)):
    return {**store.snapshot().public_dict(), "readOnly": True}


@router.post("/allowed-paths")
def update_allowed_paths(req: Optional[AllowedPathsRequest] = None, store: ConfigStore = Depends(get_store)):
    req = req or AllowedPathsRequest()
    config = store.update_allowed_paths(req.action or "", req.path)
    return {
        "allowedPaths": config.allowed_paths,
        "activeProjectRoot": config.active_project_root,
    }
