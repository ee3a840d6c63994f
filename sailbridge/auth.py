import secrets

from fastapi import Header, Request

from sailbridge.config import ConfigStore
from sailbridge.errors import Unauthorized

TOKEN_HEADER = "x-bridge-token"


def get_store(request: Request) -> ConfigStore:
    return request.app.state.store


def require_token(request: Request, x_bridge_token: str = Header("")) -> None:
    expected = get_store(request).config.token
    supplied = x_bridge_token or ""
    if not supplied or not secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8")):
        raise Unauthorized("Missing or invalid bridge token")


def is_same_origin(origin, port: int) -> bool:
    if not origin:
        return True
    return origin in (f"http://localhost:{port}", f"http://127.0.0.1:{port}")
