"""Run the Spaced Reading FastAPI application with uvicorn."""

import uvicorn

from spaced_reading.application.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "spaced_reading.application.api:get_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
