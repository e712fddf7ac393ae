"""
ASGI entry point for uvicorn
This module exposes the FastAPI app for use with uvicorn command line
"""

import logging
import os

from config_loader import load_config, setup_logging
from services.remote_server import build_api

# Load configuration
config = load_config(os.environ.get('CONFIG_FILE', 'config/config.yaml'))
setup_logging(config)

logger = logging.getLogger(__name__)

logger.info("Initializing application components...")

api = build_api(config)

# Expose the FastAPI app for uvicorn
app = api.app

logger.info("ASGI app ready for uvicorn")
