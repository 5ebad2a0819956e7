import logging

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from session_lib.logging_config import configure_logging
from session_lib.middleware import SessionManager, SessionMiddleware, require_session
from session_lib.services import ServiceContainer
from session_lib.session.store import MemorySessionStore


def test_container_singletons_and_factories():
    c = ServiceContainer()
    c.register_singleton('a', 1)
    calls = []
    c.register_factory('b', lambda: calls.append(1) or object())
    assert c.get('a') == 1
    assert c.get('b') is c.get('b')
    assert calls == [1]
    assert c.has('a') and c.has('b') and not c.has('c')
    with pytest.raises(KeyError):
        c.get('c')


def _guarded_app(store):
    app = FastAPI()

    @app.get('/guarded')
    @require_session
    async def guarded(request: Request):
        return {'ok': True}

    container = ServiceContainer()
    container.register_singleton('session_manager', SessionManager(store))
    app.state.container = container
    # No manager passed: the middleware resolves it from the container
    app.add_middleware(SessionMiddleware)
    return app


def test_require_session_allows_requests_with_session():
    client = TestClient(_guarded_app(MemorySessionStore()))
    r = client.get('/guarded')
    assert r.status_code == 200
    assert r.json() == {'ok': True}


def test_require_session_rejects_stale_cookie():
    client = TestClient(_guarded_app(MemorySessionStore()), raise_server_exceptions=False)
    r = client.get('/guarded', headers={'Cookie': 'sessionid=stale'})
    assert r.status_code == 401
    assert r.headers['set-cookie'].startswith('sessionid=; ')


def test_configure_logging_explicit_level():
    configure_logging(level='DEBUG')
    assert logging.getLogger().level == logging.DEBUG
    configure_logging(level='not-a-level')
    assert logging.getLogger().level == logging.WARNING


def test_configure_logging_reads_yaml(tmp_path):
    cfg = tmp_path / 'session_config.yml'
    cfg.write_text('session:\n  log_level: INFO\n', encoding='utf-8')
    configure_logging(config_path=cfg)
    assert logging.getLogger().level == logging.INFO


def test_manager_and_stores_satisfy_protocols():
    from session_lib.middleware.interfaces import SessionManagerProtocol
    from session_lib.session.interfaces import SessionStoreProtocol
    from session_lib.storage import create_storage
    from session_lib.storage.interfaces import StorageProtocol

    store = MemorySessionStore()
    assert isinstance(store, SessionStoreProtocol)
    assert isinstance(SessionManager(store), SessionManagerProtocol)
    assert isinstance(create_storage(backend='memory', data_dir=None), StorageProtocol)
