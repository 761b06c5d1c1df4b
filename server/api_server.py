"""Entry point of the reference cache API server.

Usage:
    python -m server.api_server
"""

import os

from server.api.api_app import create_app
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging

logging = setup_logging()
app = create_app(helper_config=HelperConfig(logger=logging))


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("API_SERVER_PORT", "5000"))
    logging.info(
        "Starting cuota_cache API server v%s from root dir: %s on port %d...",
        os.getenv("APP_VERSION", "unknown"),
        os.environ.get("ROOT_DIR", os.getcwd()),
        port,
    )
    uvicorn.run(app, host="0.0.0.0", port=port)
