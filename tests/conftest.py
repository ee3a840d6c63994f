from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from sailbridge.app import create_app
from sailbridge.config import ConfigStore


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A small project tree under tmp_path/proj."""
    root = tmp_path / "proj"
    (root / "src" / "pkg").mkdir(parents=True)
    (root / "node_modules" / "dep").mkdir(parents=True)
    (root / "docs").mkdir()
    (root / "README.md").write_text("# proj\n")
    (root / "src" / "main.py").write_text("print('hi')\n")
    (root / "src" / "pkg" / "mod.py").write_text("x = 1\n")
    (root / "docs" / "guide.md").write_text("guide\n")
    (root / ".env").write_text("SECRET=1\n")
    (tmp_path / "outside.txt").write_text("not yours\n")
    return root


@pytest.fixture
def store(tmp_path: Path) -> ConfigStore:
    store = ConfigStore(tmp_path / "cfg" / "bridge.config.json")
    store.load()
    return store


@pytest.fixture
def authorized_store(store: ConfigStore, project: Path) -> ConfigStore:
    store.update_allowed_paths("add", str(project))
    return store


@pytest.fixture
def client(authorized_store: ConfigStore) -> TestClient:
    client = TestClient(create_app(authorized_store))
    client.headers["x-bridge-token"] = authorized_store.config.token
    return client
