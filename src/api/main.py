"""FastAPI application main module.

This module defines the FastAPI application that exposes the training worker
message protocol over HTTP, plus a health check endpoint.
"""

from typing import Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.api.logging_config import RequestLoggingMiddleware, setup_logging
from src.api.routes import worker
from src.exceptions import AffinityError

setup_logging()

app = FastAPI(
    title="ShopAffinity API",
    description="Training worker for product affinity models",
    version="0.1.0",
)

app.add_middleware(RequestLoggingMiddleware)
app.include_router(worker.router)


@app.exception_handler(AffinityError)
async def affinity_error_handler(request: Request, exc: AffinityError) -> JSONResponse:
    """Render ShopAffinity errors as JSON with their status code."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": type(exc).__name__,
            "message": exc.message,
            "details": exc.details,
        },
    )


@app.get("/ping")
def ping() -> Dict[str, str]:
    """Health check endpoint.

    Returns:
        Dictionary with status key set to "ok".
    """
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
