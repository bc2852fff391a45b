import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from campus_repair.core import config
from campus_repair.core.container import ServiceContainer, build_container_from_config
from campus_repair.core.errors import CampusRepairError
from campus_repair.routes import auth_routes, complaint_routes

logger = logging.getLogger(__name__)


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return 'Invalid request'
    first = errors[0]
    field = '.'.join(str(part) for part in first.get('loc', ()) if part != 'body')
    message = first.get('msg', 'Invalid value')
    return f'{field}: {message}' if field else message


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CampusRepairError)
    async def campus_repair_error_handler(request: Request, exc: CampusRepairError):
        if exc.status_code >= 500:
            logger.error('%s on %s %s: %s', type(exc).__name__, request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={'success': False, 'message': _first_validation_message(exc)},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception('Unhandled error on %s %s', request.method, request.url.path)
        return JSONResponse(status_code=500, content={'success': False, 'message': 'Server error'})


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    if getattr(app.state, 'container', None) is None:
        config.validate_runtime_config()
        app.state.container = build_container_from_config()
    try:
        yield
    finally:
        app.state.container.close()


def create_app(container: ServiceContainer | None = None) -> FastAPI:
    """Build the API. A prebuilt container skips database setup at startup."""
    app = FastAPI(title='Campus Repair API', lifespan=_lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOW_ORIGINS,
        allow_credentials=False,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    @app.middleware('http')
    async def log_requests(request: Request, call_next):
        logger.info('%s %s', request.method, request.url.path)
        return await call_next(request)

    register_exception_handlers(app)

    if container is not None:
        app.state.container = container

    @app.get('/')
    def root():
        return {'success': True, 'message': 'Campus Repair API is running'}

    @app.get('/health')
    def health():
        return {'success': True, 'message': 'Campus Repair API is running'}

    app.include_router(auth_routes.router, prefix='/auth')
    app.include_router(complaint_routes.router, prefix='/complaints')

    upload_dir = container.photos.directory if container is not None else config.UPLOAD_DIR
    app.mount('/uploads', StaticFiles(directory=upload_dir, check_dir=False), name='uploads')

    return app


app = create_app()
