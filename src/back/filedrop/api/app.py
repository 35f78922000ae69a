"""Application factory for filedrop API."""
from importlib import resources

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, Response

from .config import APIConfig
from .errors import register_error_handlers
from .storage import Storage, LocalStorage
from .modules.files import FileService, create_file_router
from ..observability.logging import configure_logging, get_logger
from ..observability.metrics import metrics_text
from ..observability.middleware import (
    MetricsMiddleware,
    RequestIdMiddleware,
    RequestLoggingMiddleware,
)

logger = get_logger(__name__)


def _load_index_html() -> str:
    return resources.files('filedrop').joinpath('static/index.html').read_text(encoding='utf-8')


def create_app(
    config: APIConfig | None = None,
    storage: Storage | None = None,
    service: FileService | None = None,
) -> FastAPI:
    """Create a pre-wired FastAPI application.

    All dependencies are injectable for testing and customization.

    Args:
        config: API configuration. Defaults to environment-driven APIConfig().
        storage: Storage backend. Defaults to LocalStorage on config.storage_root.
        service: File service. Defaults to FileService(config, storage).

    Returns:
        Configured FastAPI application with all routes mounted.

    Example:
        # Minimal usage
        app = create_app()

        # Custom storage root
        app = create_app(APIConfig(storage_root=Path('/srv/uploads')))
    """
    config = config or APIConfig()
    configure_logging(config.log_level, config.log_format)
    config.validate_startup()
    storage = storage or LocalStorage(config.storage_root)

    app = FastAPI(
        title='filedrop API',
        description='Upload, list, rename and download files on a local directory',
        version='0.1.0',
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )
    # Outermost, so every log line below it carries the request id
    app.add_middleware(RequestIdMiddleware)

    register_error_handlers(app)

    app.include_router(create_file_router(config, storage, service), prefix='/api')

    @app.get('/health')
    async def health():
        """Health check endpoint."""
        return {
            'status': 'ok',
            'storage_root': str(config.storage_root),
            'storage_root_exists': storage.root_exists(),
        }

    @app.get('/metrics')
    async def metrics():
        """Prometheus exposition endpoint."""
        body, content_type = metrics_text()
        return Response(content=body, media_type=content_type)

    if config.serve_ui:
        index_html = _load_index_html()

        @app.get('/', response_class=HTMLResponse, include_in_schema=False)
        @app.get('/index.html', response_class=HTMLResponse, include_in_schema=False)
        async def index():
            return HTMLResponse(index_html)

    logger.info('app_created', storage_root=str(config.storage_root), serve_ui=config.serve_ui)
    return app
