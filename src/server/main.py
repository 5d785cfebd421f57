"""FastAPI application factory for the school results REST API."""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import configure_logging, get_settings

from . import auth
from .database import Base, create_db_engine, create_session_factory
from .routers import resource_routers

logger = logging.getLogger(__name__)


def create_app(database_url: Optional[str] = None) -> FastAPI:
    configure_logging()
    settings = get_settings()
    engine = create_db_engine(database_url or settings.DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    session_factory = create_session_factory(engine)
    auth.seed_admin(session_factory)

    app = FastAPI(title="School Results API")
    app.state.engine = engine
    app.state.session_factory = session_factory

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "البيانات المرسلة غير صالحة."},
        )

    app.include_router(auth.router, prefix="/api")
    for router in resource_routers():
        app.include_router(router, prefix="/api")

    logger.info("API ready on %s", engine.url.render_as_string(hide_password=True))
    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(), host=settings.SERVER_HOST, port=settings.SERVER_PORT)
