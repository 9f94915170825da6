#!/usr/bin/env python3
"""Run the synthetic lead API server."""
import uvicorn
from synthlead.config import LOG_FILE, LOG_JSON, LOG_LEVEL
from synthlead.utils.logging import setup_logging

if __name__ == "__main__":
    setup_logging(LOG_LEVEL, json_format=LOG_JSON, log_file=LOG_FILE)
    uvicorn.run("synthlead.server.api:app", host="0.0.0.0", port=8000, reload=True)
