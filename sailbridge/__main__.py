import logging
import os
import sys

import uvicorn

from sailbridge.app import create_app
from sailbridge.config import ConfigStore
from sailbridge.errors import BridgeError

logger = logging.getLogger("bridge")


def main() -> None:
    store = ConfigStore()
    try:
        port = int(os.getenv("BRIDGE_PORT") or store.config.port)
        if not 0 < port < 65536:
            raise ValueError(f"port out of range: {port}")
        store.set_port(port)
    except (BridgeError, OSError, ValueError) as e:
        logger.error(f"[SailCode-Bridge] failed to start: {e}")
        sys.exit(1)

    host = os.getenv("BRIDGE_HOST", "127.0.0.1")
    app = create_app(store)
    logger.info(f"[SailCode-Bridge] running on http://{host}:{port}")
    logger.info(f"[SailCode-Bridge] config: {store.path}")
    uvicorn.run(app, host=host, port=port, log_level=os.getenv("BRIDGE_LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
