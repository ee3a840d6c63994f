# sailbridge/app.py
import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from sailbridge import __version__
from sailbridge.auth import get_store, is_same_origin
from sailbridge.config import ConfigStore
from sailbridge.config_routes import router as config_router
from sailbridge.errors import BridgeError, Forbidden, InternalError
from sailbridge.tool_router import router as tools_router

APP_TITLE = "SailCode Bridge"

logger = logging.getLogger("bridge")
if not logging.getLogger().handlers:
    level = os.getenv("BRIDGE_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format="%(asctime)s | %(levelname)s | %(message)s")


def create_app(store: Optional[ConfigStore] = None) -> FastAPI:
    store = store or ConfigStore()
    port = store.config.port

    app = FastAPI(title=APP_TITLE, version=__version__)
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[f"http://localhost:{port}", f"http://127.0.0.1:{port}", *store.config.allow_origins],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---- Error envelope -------------------------------------------------------
    @app.exception_handler(BridgeError)
    async def _bridge_error(request: Request, exc: BridgeError):
        if exc.status_code in (401, 403):
            logger.warning(f"[{request.method} {request.url.path}] {exc.code}: {exc.message}")
        elif exc.status_code >= 500:
            logger.error(f"[{request.method} {request.url.path}] {exc.code}: {exc.message}")
        return JSONResponse(exc.to_dict(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "header"))
            message = f"Invalid {field or 'request'}: {first.get('msg', 'malformed value')}"
        else:
            message = "Malformed request"
        return JSONResponse({"code": "INVALID_REQUEST", "message": message}, status_code=400)

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception):
        logger.exception(f"[{request.method} {request.url.path}] unhandled error: {exc}")
        return JSONResponse(InternalError("Internal error").to_dict(), status_code=500)

    # ---- Probes (no token) ----------------------------------------------------
    @app.get("/health")
    def health():
        return {"status": "ok", "version": __version__, "requiresAuth": True}

    @app.get("/capabilities")
    def capabilities(request: Request):
        config = get_store(request).snapshot()
        return {
            "envProbe": True,
            "projectScan": True,
            "commandExecute": False,
            "fileRead": True,
            "fileWrite": False,
            "readOnly": True,
            "maxFileSize": config.max_file_size,
            "allowedPathsCount": len(config.allowed_paths),
            "activeProjectRoot": config.active_project_root or None,
        }

    @app.get("/bootstrap")
    def bootstrap(request: Request):
        config = get_store(request).snapshot()
        if not is_same_origin(request.headers.get("origin"), config.port):
            raise Forbidden("Invalid origin")
        public = config.public_dict()
        public.pop("ignoredDirs", None)
        return {"token": config.token, "config": public}

    # ---- Routers --------------------------------------------------------------
    app.include_router(tools_router)
    app.include_router(config_router)

    # ---- Browser UI -----------------------------------------------------------
    ui_dir = os.getenv("BRIDGE_UI_DIR") or os.path.join(os.getcwd(), "public")
    if os.path.isdir(ui_dir):
        app.mount("/", StaticFiles(directory=ui_dir, html=True), name="ui")
        logger.info(f"Serving UI from {ui_dir}")

    return app
