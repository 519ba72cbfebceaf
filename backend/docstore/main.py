"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from docstore.config import Settings
from docstore.database import build_engine, build_session_factory
from docstore.errors import DocumentStoreError
from docstore.models import Base
from docstore.services.document_service import DocumentService, StorageConfig

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and the upload directory on startup, dispose the engine on shutdown."""
    async with app.state.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    upload_path = await app.state.document_service.storage.ensure_dir()
    logger.info("Upload directory ready at %s", upload_path)

    yield

    await app.state.engine.dispose()


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"statusCode": status_code, "message": message})


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DocumentStoreError)
    async def document_store_error_handler(request: Request, exc: DocumentStoreError):
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
        )
        return _error_response(400, f"Validation failed ({details})")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app with its engine, session factory and document service."""
    settings = settings or Settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Document Store API",
        version="1.0.0",
        description="Upload, list, download and delete PDF documents.",
        lifespan=lifespan,
    )

    engine = build_engine(settings.DATABASE_URL)
    session_factory = build_session_factory(engine)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.document_service = DocumentService(StorageConfig.from_settings(settings), session_factory)

    # CORS
    origins = settings.cors_origins
    logger.info("CORS enabled for origin(s): %s", ", ".join(origins))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    _register_exception_handlers(app)

    @app.get("/api/health")
    async def health_check(request: Request):
        """Verify API and database connectivity."""
        try:
            async with request.app.state.session_factory() as db:
                await db.execute(text("SELECT 1"))
            return {"status": "ok", "database": "connected"}
        except Exception as e:
            logger.warning("Health check failed: %s", e)
            return {"status": "error", "database": str(e)}

    from docstore.routes.documents import router as documents_router
    app.include_router(documents_router)

    return app
