#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Creates tables when pointed at a local database, then serves with reload.
"""
from pathlib import Path
import sys

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

import uvicorn

if __name__ == "__main__":
    from skilloop.init_db import init_db

    init_db()
    print("Access at: http://localhost:8000")
    print("API Docs: http://localhost:8000/docs")

    uvicorn.run("skilloop.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
