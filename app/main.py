import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import auth, esg, reports, responses
from app.config import Settings, get_settings
from app.services.storage import build_storage

load_dotenv()

log = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API. Storage is chosen here, once per app instance:
    DATABASE_URL set -> SQL, unset -> in-memory.
    """
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s | %(levelname)-8s | %(name)s - %(message)s",
    )

    storage = build_storage(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        storage.close()

    app = FastAPI(title="ESG Tracker API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = storage

    # credentials=True is rejected by browsers alongside a "*" origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(responses.router, prefix="/api", tags=["Responses"])
    app.include_router(esg.router, prefix="/api", tags=["ESG Metrics"])
    app.include_router(reports.router, prefix="/api/reports", tags=["Reports"])

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": "ESG Tracker API",
            "version": "1.0.0",
            "server_time": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/health", tags=["Root"])
    async def health():
        return {"status": "ok", "storage": storage.backend}

    log.info("ESG Tracker API ready (storage=%s)", storage.backend)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
