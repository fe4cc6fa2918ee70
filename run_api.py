#!/usr/bin/env python3
"""
Simple script to run the Workforce Allocation API server.
"""

import logging

import uvicorn

from workforce_allocation.config import Settings, load_env

if __name__ == "__main__":
    load_env()
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("Starting Workforce Allocation API...")
    print(f"API will be available at: http://localhost:{settings.api_port}")
    print(f"Interactive docs at: http://localhost:{settings.api_port}/docs")

    uvicorn.run(
        "workforce_allocation.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,  # Auto-reload on code changes
        log_level=settings.log_level.lower()
    )
