"""Application factory for the session FastAPI app.

This module exposes `create_app(config) -> FastAPI` which performs all
setup (logging, session store composition, middleware and router
registration). Nothing happens at import time so tests can construct
isolated apps.

To create an app for production or local runs:

    from session_lib.main import create_app
    from session_lib.config import load_config
    app = create_app(load_config())

Host applications that only want the middleware can compose it directly:

    store = create_store('file', directory=..., lock_directory=...)
    app.add_middleware(SessionMiddleware, session_manager=SessionManager(store, config))
"""
from typing import Optional

from fastapi import FastAPI

from session_lib.config.config import SessionConfig
from session_lib.logging_config import configure_logging
from session_lib.session.interfaces import SessionStoreProtocol
from session_lib.session.store import create_store


def create_app(config: Optional[SessionConfig] = None, store: Optional[SessionStoreProtocol] = None) -> FastAPI:
    """Create and return a configured FastAPI application.

    `store` overrides the store named by `config.store`; tests use it to
    inject a prepared store.
    """
    config = config or SessionConfig()
    logger = configure_logging(level=config.log_level or ('DEBUG' if config.debug else None))

    # Compose the session store and manager
    if store is None:
        store = create_store(config.store, **config.effective_store_args())

    from session_lib.middleware.session import SessionManager
    session_manager = SessionManager(store, config)

    from session_lib.services import ServiceContainer
    container = ServiceContainer()
    container.register_singleton("session_config", config)
    container.register_singleton("session_store", store)
    container.register_singleton("session_manager", session_manager)

    app = FastAPI(title="Session Server")
    # Runtime code resolves services from this container only.
    app.state.container = container

    from session_lib.middleware import SessionMiddleware
    app.add_middleware(SessionMiddleware, session_manager=session_manager)
    logger.info("Session middleware enabled (cookie %s)", config.cookie_name)

    # Router registration: import routers here to avoid import-time side-effects
    from session_lib.session.api import router as session_router
    from session_lib.server.api import router as server_router

    app.include_router(session_router, prefix='/api')
    app.include_router(server_router, prefix='/api')

    return app
