#!/usr/bin/env python3
"""
Run script for the Speaking Coach API
"""
import uvicorn

from speaking_coach.config.settings import settings

if __name__ == "__main__":
    uvicorn.run(
        "speaking_coach.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
