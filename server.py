"""
Development server for the Fair Dice Duel HTTP API.
Run: python server.py
"""

import logging

import uvicorn

from fairdice import config
from fairdice.api.main import app

if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL)
    print(f"Serving at http://{config.API_HOST}:{config.API_PORT}")
    print("Press Ctrl+C to stop")
    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT, log_level=config.LOG_LEVEL.lower())
