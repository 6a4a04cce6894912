"""
FastAPI application for the rental payments service.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from core.config import settings
from payments.exceptions import AuthorizationError
from monitoring import health_check
from monitoring.logger import get_logger
from payments import checkout_handler, update_handler, webhook_handler

logger = get_logger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="Rental Payments API", version="1.0.0")

    origins = settings.allowed_origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["POST", "OPTIONS"],
            allow_headers=["Content-Type"],
        )

    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(request: Request, exc: AuthorizationError):
        return PlainTextResponse("Unauthorized", status_code=401)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {exc}",
            extra={"path": request.url.path},
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    app.include_router(webhook_handler.router)
    app.include_router(update_handler.router)
    app.include_router(checkout_handler.router)
    app.include_router(health_check.router)

    return app


app = create_app()


def main():
    import uvicorn

    uvicorn.run("api.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
