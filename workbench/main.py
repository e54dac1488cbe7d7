from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from workbench.api.deps import install_stores
from workbench.api.v1 import api_router
from workbench.core.errors import register_exception_handlers
from workbench.core.health import APP_VERSION
from workbench.core.response_envelope import register_response_envelope
from workbench.core.limiter import limiter
from workbench.core.logging import configure_logging
from workbench.core.settings import settings
from workbench.events import register_event_handlers
from workbench.middlewares.request_context import RequestContextMiddleware


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="DSCR Loan Workbench", version=APP_VERSION)
    register_exception_handlers(app)
    register_response_envelope(app)
    app.state.limiter = limiter
    install_stores(app)
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router, prefix="/api/v1")
    register_event_handlers(app)
    return app


app = create_app()
