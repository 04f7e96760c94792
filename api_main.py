"""Entry point for the HTTP API server.

Usage:
    # Development (with auto-reload):
    API_RELOAD=true python api_main.py

    # Or directly with uvicorn:
    uvicorn prompt_forge.api.app:app --reload --host 0.0.0.0 --port 8000

    # Production:
    ENVIRONMENT=production uvicorn prompt_forge.api.app:app --workers 4
"""

import os

import uvicorn

from prompt_forge.core.logging import configure_logging

# Configure structured logging before importing app
configure_logging()

if __name__ == "__main__":
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    reload = os.getenv("API_RELOAD", "false").lower() == "true"
    workers = int(os.getenv("API_WORKERS", "1"))

    uvicorn.run(
        "prompt_forge.api.app:app",
        host=host,
        port=port,
        reload=reload,
        workers=workers if not reload else 1,  # Can't use workers with reload
    )
