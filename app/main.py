import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from app.api.routes import api_router
from app.core.config import Settings, settings
from app.services.airport_dataset import build_airport_directory


logger = logging.getLogger(__name__)


def create_app(config: Settings | None = None) -> FastAPI:
    config = config or settings
    logging.basicConfig(level=config.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # DataUnavailable here aborts startup
        app.state.airport_directory = build_airport_directory(config)
        yield

    app = FastAPI(title=config.app_name, lifespan=lifespan)
    # allow_credentials must be False with a wildcard origin
    cors_origins = config.cors_origins
    allow_creds = cors_origins != "*"
    if cors_origins == "*":
        cors_origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=allow_creds,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def catch_unhandled(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(status_code=500, content={"detail": "internal_error"})

    app.include_router(api_router)
    return app


app = create_app()
