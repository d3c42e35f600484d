#!/usr/bin/env python3
# run.py
"""
Development server runner.

Creates the tables of the configured local database before starting the
reloading server.
"""

import uvicorn

from litrato.core.config import settings
from litrato.database import init_db

if __name__ == "__main__":
    if settings.environment == "production":
        raise SystemExit("run.py is for local development only")

    init_db()
    print(f"Starting Litrato scheduling API ({settings.environment}) at http://localhost:8000")
    print("API Docs: http://localhost:8000/docs")

    uvicorn.run("litrato.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
