# sailbridge/config.py
import contextlib
import json
import logging
import os
import secrets
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from sailbridge.errors import InternalError
from sailbridge.tools.paths import normalize_path
from sailbridge.tools.roots import apply_root_action

logger = logging.getLogger("bridge.config")

DEFAULT_PORT = 3737
CONFIG_DIR = Path(os.getenv("BRIDGE_CONFIG_DIR") or (Path.home() / ".sailcode"))
CONFIG_FILE = "bridge.config.json"

# Request overrides are clamped to these whatever the config says.
SCAN_DEPTH_CEILING = 8
SCAN_ENTRIES_CEILING = 1500

DEFAULT_ALLOW_ORIGINS = [
    "http://localhost:1722",
    "http://127.0.0.1:1722",
    "http://localhost:722",
    "http://127.0.0.1:722",
]
DEFAULT_FORBIDDEN_EXTENSIONS = [
    ".env", ".env.local", ".env.production",
    ".key", ".pem", ".p12", ".pfx",
    ".exe", ".dll", ".so", ".dylib",
    ".zip", ".tar", ".gz", ".rar",
]
DEFAULT_IGNORED_DIRS = [
    "node_modules", ".git", ".next", ".turbo",
    "dist", "build", "out",
]


def new_token() -> str:
    return secrets.token_hex(16)


class BridgeConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    token: str = ""
    allowed_paths: List[str] = Field(default_factory=list, alias="allowedPaths")
    active_project_root: str = Field("", alias="activeProjectRoot")
    port: int = Field(DEFAULT_PORT, ge=1, le=65535)
    allow_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_ALLOW_ORIGINS), alias="allowOrigins")
    max_file_size: int = Field(1024 * 1024, gt=0, alias="maxFileSize")
    max_read_lines: int = Field(10000, ge=0, alias="maxReadLines")
    max_depth: int = Field(4, gt=0, alias="maxDepth")
    max_entries: int = Field(800, gt=0, alias="maxEntries")
    forbidden_extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_FORBIDDEN_EXTENSIONS), alias="forbiddenExtensions"
    )
    ignored_dirs: List[str] = Field(default_factory=lambda: list(DEFAULT_IGNORED_DIRS), alias="ignoredDirs")

    @field_validator("allowed_paths")
    @classmethod
    def _canonical_roots(cls, value: List[str]) -> List[str]:
        roots: List[str] = []
        for raw in value:
            root = normalize_path(raw)
            if root and root not in roots:
                roots.append(root)
        return roots

    @field_validator("forbidden_extensions")
    @classmethod
    def _lower_extensions(cls, value: List[str]) -> List[str]:
        return [ext.lower() for ext in value]

    @model_validator(mode="after")
    def _active_is_member(self):
        active = normalize_path(self.active_project_root) or ""
        if active not in self.allowed_paths:
            active = self.allowed_paths[0] if self.allowed_paths else ""
        self.active_project_root = active
        return self

    def public_dict(self) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True)
        data.pop("token", None)
        return data


def _input_key(loc: Any, data: Dict[str, Any]) -> Optional[str]:
    if loc in data:
        return loc
    field = BridgeConfig.model_fields.get(loc)
    if field is not None and field.alias in data:
        return field.alias
    return None


def parse_config(data: Any) -> BridgeConfig:
    """Validate a loaded JSON document, dropping fields that fail validation."""
    if not isinstance(data, dict):
        data = {}
    data = dict(data)
    while True:
        try:
            return BridgeConfig.model_validate(data)
        except ValidationError as e:
            bad = {_input_key(err["loc"][0], data) for err in e.errors() if err["loc"]}
            bad.discard(None)
            if not bad:
                logger.warning(f"Config rejected, using defaults: {e}")
                return BridgeConfig()
            for key in sorted(bad):
                logger.warning(f"Ignoring invalid config field '{key}'")
                data.pop(key, None)


class ConfigStore:
    """Owns the process-wide config: load once, mutate under the lock, persist."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else CONFIG_DIR / CONFIG_FILE
        self._lock = threading.RLock()
        self._config: Optional[BridgeConfig] = None

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def config(self) -> BridgeConfig:
        if self._config is None:
            self.load()
        return self._config

    def load(self) -> BridgeConfig:
        with self._lock:
            data: Any = {}
            if self.path.exists():
                try:
                    data = json.loads(self.path.read_text(encoding="utf-8"))
                except (OSError, ValueError) as e:
                    logger.warning(f"Could not parse {self.path}: {e}")
                    data = {}
            config = parse_config(data)
            if not config.token:
                config.token = new_token()
            self._write(config)
            self._config = config
            logger.info(f"Config loaded from {self.path} ({len(config.allowed_paths)} allowed path(s))")
            return config

    def save(self) -> None:
        with self._lock:
            if self._config is not None:
                self._write(self._config)

    def _write(self, config: BridgeConfig) -> None:
        payload = json.dumps(config.model_dump(by_alias=True), indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=str(self.path.parent), prefix=".bridge-", suffix=".tmp")
        except OSError as e:
            raise InternalError(f"Failed to save config: {e.strerror or e}")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp, self.path)
        except BaseException as e:
            with contextlib.suppress(OSError):
                os.remove(tmp)
            if isinstance(e, OSError):
                raise InternalError(f"Failed to save config: {e.strerror or e}")
            raise

    def snapshot(self) -> BridgeConfig:
        with self._lock:
            return self.config.model_copy(deep=True)

    def set_port(self, port: int) -> None:
        with self._lock:
            if self.config.port != port:
                updated = self.config.model_copy(deep=True)
                updated.port = port
                self._write(updated)
                self._config = updated

    def update_allowed_paths(self, action: str, raw_path: str) -> BridgeConfig:
        """Apply one add/remove/setActive mutation and persist the result.

        The mutation runs on a copy that replaces the live config only once it
        is on disk.
        """
        with self._lock:
            updated = self.config.model_copy(deep=True)
            apply_root_action(updated, action, raw_path)
            self._write(updated)
            self._config = updated
            return self.snapshot()
