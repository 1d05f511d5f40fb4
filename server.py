# server.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from amq_admin.api import topics as topics_router
from amq_admin.core.config import get_settings
from amq_admin.core.errors import install_exception_handlers
from amq_admin.core.exceptions import AdminError
from amq_admin.infra.activemq.session import BrokerSession
from amq_admin.models.topics import HealthResponse

log = logging.getLogger(__name__)


def create_app(session: Optional[BrokerSession] = None) -> FastAPI:
    settings = session.settings if session else get_settings()

    # Lifespan handler owns the broker session: connect at startup, close at shutdown
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.session = session or BrokerSession(settings)
        try:
            app.state.session.connect()
        except AdminError as exc:
            # Topic routes answer 503 until a broker is reachable
            log.warning("starting without broker: %s", exc)
        try:
            yield
        finally:
            app.state.session.close()

    app = FastAPI(
        title="ActiveMQ Topic Admin API",
        version="1.0.0",
        lifespan=lifespan,
        openapi_url="/api/v1/openapi.json",
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
    )

    # --- CORS: allow web-ui during development (configurable via settings.cors_allow_origins) ---
    allow_origins = settings.cors_allow_origins or [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_exception_handlers(app)

    app.include_router(topics_router.router, prefix="/api/v1")

    @app.get("/health", response_model=HealthResponse)
    def health(request: Request):
        return HealthResponse(status="ok", brokerConnected=request.app.state.session.connected)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=get_settings().log_level.upper())
    uvicorn.run("server:app", host="0.0.0.0", port=8000, reload=True)
