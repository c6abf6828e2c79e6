# src/fairmint/api/__main__.py
from __future__ import annotations

import os

import uvicorn

from fairmint.env import load_dotenv_if_present


def main() -> None:
    # Load .env early so FAIRMINT_* vars exist before anything reads them.
    load_dotenv_if_present()

    # Import after dotenv load (prevents "config read before env" surprises)
    from fairmint.api.app import create_app
    from fairmint.api.structured_logging import configure_structured_logging
    from fairmint.runtime.tracker_config import load_tracker_config

    cfg = load_tracker_config()
    configure_structured_logging(cfg.log_level)

    host = os.getenv("FAIRMINT_API_HOST", cfg.api_host)
    port = int(os.getenv("FAIRMINT_API_PORT", str(cfg.api_port)))

    uvicorn.run(create_app(config=cfg), host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
