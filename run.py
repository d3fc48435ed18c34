"""
Run the intake API server.
Usage: python3 run.py   (from the project root; HOST/PORT/DEBUG read from the environment)
"""
import uvicorn

from config import settings

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
