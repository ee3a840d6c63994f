"""Mutations of the authorized-root set and the active root.

Every function works on the live config object in place; callers hold the
store lock and persist afterwards.
"""
import logging
import os
from typing import TYPE_CHECKING

from sailbridge.errors import InvalidRequest, NotADirectory, NotFound
from sailbridge.tools.paths import normalize_path

if TYPE_CHECKING:
    from sailbridge.config import BridgeConfig

logger = logging.getLogger("bridge.roots")

ACTIONS = ("add", "remove", "setActive")


def _require_path(raw_path) -> str:
    if not isinstance(raw_path, str):
        raise InvalidRequest("path is required")
    resolved = normalize_path(raw_path)
    if resolved is None:
        raise InvalidRequest("path is required")
    return resolved


def _require_directory(resolved: str) -> None:
    if not os.path.exists(resolved):
        raise NotFound("Path not found", path=resolved)
    if not os.path.isdir(resolved):
        raise NotADirectory("Path is not a directory", path=resolved)


def add_root(config: "BridgeConfig", raw_path: str) -> str:
    resolved = _require_path(raw_path)
    _require_directory(resolved)
    if resolved not in config.allowed_paths:
        config.allowed_paths.append(resolved)
        logger.info(f"[roots] added {resolved}")
    if not config.active_project_root:
        config.active_project_root = resolved
    return resolved


def remove_root(config: "BridgeConfig", raw_path: str) -> str:
    # no filesystem check: a root whose directory is gone must stay removable
    resolved = _require_path(raw_path)
    if resolved in config.allowed_paths:
        config.allowed_paths = [p for p in config.allowed_paths if p != resolved]
        logger.info(f"[roots] removed {resolved}")
    if config.active_project_root == resolved or config.active_project_root not in config.allowed_paths:
        config.active_project_root = config.allowed_paths[0] if config.allowed_paths else ""
    return resolved


def set_active_root(config: "BridgeConfig", raw_path: str) -> str:
    resolved = _require_path(raw_path)
    if resolved not in config.allowed_paths:
        raise InvalidRequest("Path not in allowlist", path=resolved)
    _require_directory(resolved)
    config.active_project_root = resolved
    logger.info(f"[roots] active root is now {resolved}")
    return resolved


_HANDLERS = {
    "add": add_root,
    "remove": remove_root,
    "setActive": set_active_root,
}


def apply_root_action(config: "BridgeConfig", action: str, raw_path: str) -> str:
    handler = _HANDLERS.get(action)
    if handler is None:
        raise InvalidRequest("Invalid action", allowedActions=list(ACTIONS))
    return handler(config, raw_path)
