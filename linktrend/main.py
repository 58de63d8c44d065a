import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from linktrend.core.config import settings
from linktrend.core.db import Database, database
from linktrend.core.exceptions import register_exception_handlers
from linktrend.core.middleware import RateLimitMiddleware


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(db: Database = database) -> FastAPI:
    configure_logging()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json"
    )

    @app.on_event("startup")
    async def startup_event():
        db.connect()

    @app.on_event("shutdown")
    async def shutdown_event():
        await db.disconnect()

    @app.get("/health")
    def health_check():
        return {"status": "ok", "database": "connected" if db.is_connected else "not connected"}

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(
        RateLimitMiddleware,
        limit_per_minute=settings.RATE_LIMIT_PER_MINUTE,
        login_limit_per_minute=settings.LOGIN_RATE_LIMIT_PER_MINUTE,
        login_path=f"{settings.API_PREFIX}/auth/login",
    )

    register_exception_handlers(app)

    from linktrend.modules.auth.router import router as auth_router
    from linktrend.modules.media.router import router as media_router
    from linktrend.modules.videos.router import router as videos_router
    from linktrend.modules.transactions.router import router as transactions_router
    from linktrend.modules.admin.router import router as admin_router, users_router

    app.include_router(auth_router, prefix=f"{settings.API_PREFIX}/auth", tags=["auth"])
    app.include_router(media_router, prefix=f"{settings.API_PREFIX}/upload", tags=["upload"])
    app.include_router(videos_router, prefix=f"{settings.API_PREFIX}/videos", tags=["videos"])
    app.include_router(transactions_router, prefix=f"{settings.API_PREFIX}/transactions", tags=["transactions"])
    app.include_router(users_router, prefix=f"{settings.API_PREFIX}/users", tags=["users"])
    app.include_router(admin_router, prefix=f"{settings.API_PREFIX}/admin", tags=["admin"])

    return app


app = create_app()


if __name__ == "__main__":
    import os
    import uvicorn
    uvicorn.run("linktrend.main:app", host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
