"""Project Prompt API — FastAPI application entry point.

Run with ``uvicorn src.main:create_app --factory`` or ``python -m src.main``.
"""

import logging
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI

from src.auth.routes import router as auth_router
from src.chat.routes import router as chat_router
from src.config.cors import SecurityHeadersMiddleware, configure_cors
from src.config.settings import Settings, get_settings
from src.middleware.body_limit import BodySizeLimitMiddleware
from src.middleware.error_handler import UnhandledErrorMiddleware, register_error_handlers
from src.middleware.rate_limiter import RateLimiterMiddleware
from src.middleware.request_id import RequestIDMiddleware
from src.projects.routes import router as projects_router
from src.users.routes import router as users_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Project Prompt API",
        description=(
            "Store prompt collections (projects) and chat with an LLM using them as history.\n\n"
            "## Authentication\n"
            "All endpoints except `/health` and `/api/auth/*` require "
            "`Authorization: Bearer <token>`."
        ),
        version="1.0.0",
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        openapi_tags=[
            {"name": "Health", "description": "Health check endpoints"},
            {"name": "Auth", "description": "Register and login"},
            {"name": "Users", "description": "Profile of the authenticated user"},
            {"name": "Projects", "description": "Projects, their prompts and files"},
            {"name": "Chat", "description": "Send messages to the LLM"},
        ],
    )
    app.state.settings = settings
    app.state.db = None
    app.state.llm = None

    # --- Middleware (last added runs first) ---
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(BodySizeLimitMiddleware, settings=settings)
    app.add_middleware(RateLimiterMiddleware, settings=settings)
    configure_cors(app, settings)
    app.add_middleware(SecurityHeadersMiddleware, settings=settings)
    app.add_middleware(RequestIDMiddleware)

    # --- Error handlers ---
    register_error_handlers(app)

    # --- Routes ---
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(projects_router)
    app.include_router(chat_router)

    @app.get("/health", tags=["Health"], summary="Health check", description="Returns OK if the service is running.")
    async def health_check():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    logger.info("App created (environment=%s)", settings.ENVIRONMENT)
    return app


if __name__ == "__main__":
    uvicorn.run("src.main:create_app", factory=True, host="0.0.0.0", port=get_settings().PORT)
