from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse

from onlineshops.core.config import settings
from onlineshops.core.exceptions import OnlineShopsException
from onlineshops.core.logging import setup_logging
from onlineshops.core.security_headers import install_security_headers_middleware
from onlineshops.routers import auth, products, shops, users
from onlineshops.services.token_cleanup import start_token_cleanup, stop_token_cleanup


def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL)
    settings.validate_runtime_security()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        await start_token_cleanup()
        try:
            yield
        finally:
            await stop_token_cleanup()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=settings.allowed_hosts,
    )
    install_security_headers_middleware(app, settings)

    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(users.router, prefix="/users", tags=["users"])
    app.include_router(shops.router, prefix="/shops", tags=["shops"])
    app.include_router(products.router, prefix="/products", tags=["products"])

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.exception_handler(OnlineShopsException)
    async def handle_app_exception(_: Request, exc: OnlineShopsException) -> JSONResponse:
        headers = exc.headers if getattr(exc, "headers", None) else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    return app


app = create_app()
