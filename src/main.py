"""
TV Remote Gateway - command line entry point

    python src/main.py [config.yaml]

The config path comes from the first argument, then CONFIG_FILE, then
config/config.yaml. uvicorn owns SIGINT/SIGTERM; serve() returns once it
has shut down.
"""

import asyncio
import logging
import os
import sys
from typing import List, Optional

import yaml

from config_loader import load_config, setup_logging
from services.remote_server import RemoteServer

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = 'config/config.yaml'


def resolve_config_path(argv: List[str], environ=os.environ) -> str:
    if len(argv) > 1:
        return argv[1]
    return environ.get('CONFIG_FILE', DEFAULT_CONFIG_FILE)


async def run(config_path: str) -> int:
    """Load configuration, start the gateway and serve until shutdown"""
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        # Logging is not configured yet
        print(f"Cannot start TV Remote Gateway: {e}", file=sys.stderr)
        return 1

    setup_logging(config)
    logger.info(f"Loaded configuration from {config_path}")

    server = RemoteServer(config_path, config=config)
    await server.start()
    logger.info("TV Remote Gateway stopped")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    return asyncio.run(run(resolve_config_path(sys.argv if argv is None else argv)))


if __name__ == "__main__":
    sys.exit(main())
