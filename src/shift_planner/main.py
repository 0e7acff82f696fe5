from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shift_planner.api.routes import api_router
from shift_planner.core.config import get_settings
from shift_planner.core.logging_setup import configure_logging


def create_application() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)
    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        description="API for generating fair monthly shift schedules.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Simple health endpoint for infrastructure monitoring."""
        return {"status": "ok"}

    return app


app = create_application()
