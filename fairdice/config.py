"""
Single place for runtime configuration.
Every value can be overridden from the environment (FAIRDICE_*).
"""

import os

# How many times a prompt is re-issued (help, invalid input) before the match is aborted.
MAX_PROMPT_ATTEMPTS = int(os.environ.get("FAIRDICE_MAX_PROMPT_ATTEMPTS", "20"))

# Console keeps WARNING so engine logs do not interleave with prompts.
LOG_LEVEL = os.environ.get("FAIRDICE_LOG_LEVEL", "WARNING").upper()

# HTTP matches held in memory at once; a new match beyond this is refused.
MAX_LIVE_MATCHES = int(os.environ.get("FAIRDICE_MAX_LIVE_MATCHES", "100"))
# Seconds a match may wait for an answer before it is cancelled and dropped.
MATCH_IDLE_TIMEOUT = float(os.environ.get("FAIRDICE_MATCH_IDLE_TIMEOUT", "600"))

API_HOST = os.environ.get("FAIRDICE_API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("FAIRDICE_API_PORT", "8080"))

# Comma-separated list of allowed frontend origins
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "FAIRDICE_CORS_ORIGINS",
        "http://localhost:5173,http://localhost:3000",
    ).split(",")
    if origin.strip()
]
