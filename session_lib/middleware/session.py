from dataclasses import dataclass
from typing import Callable, Optional
import functools
import inspect
import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.requests import Request
from fastapi import HTTPException

from session_lib.config.config import SessionConfig
from session_lib.cookies.codec import CookieCodec, Expiry
from session_lib.services.resolver import resolve_service
from session_lib.session.errors import SessionNotFound
from session_lib.session.interfaces import SessionStoreProtocol
from session_lib.session.models import Session

logger = logging.getLogger(__name__)

# Status returned by `authenticate`; the request always proceeds.
OK = 0

# Expiry used to make the client discard the cookie
DELETE_EXPIRY = "-10m"


@dataclass
class SessionContext:
    """Per-request session state kept on `request.state.session_context`."""

    session: Optional[Session] = None
    set_cookie: Optional[str] = None


def get_session_context(request: Request) -> SessionContext:
    ctx = getattr(request.state, 'session_context', None)
    if ctx is None:
        ctx = SessionContext()
        request.state.session_context = ctx
    return ctx


class SessionManager:
    """Attach cookie-identified sessions to requests.

    `authenticate` is the per-request hook: it resolves the session named by
    the cookie, or creates a new one, and queues a refreshed `Set-Cookie`
    header on the request context. A cookie naming a session the store no
    longer knows is answered with a deletion cookie instead; any other store
    failure propagates.
    """

    def __init__(self, store: SessionStoreProtocol, config: Optional[SessionConfig] = None,
                 codec: Optional[CookieCodec] = None) -> None:
        self.store = store
        self.config = config or SessionConfig()
        self.codec = codec or CookieCodec()

    def authenticate(self, request: Request) -> int:
        self.get_session(request)
        return OK

    def get_session(self, request: Request) -> Optional[Session]:
        jar = self.codec.parse(request.headers.get('cookie'))
        sid = jar.get(self.config.cookie_name)
        if self.config.debug and sid is not None:
            logger.debug("SID from cookie: %s", sid)
        # An empty value means no session; '0' is a valid id.
        if not sid:
            sid = None

        try:
            session = self.store.resolve_or_create(sid)
        except SessionNotFound:
            if self.config.debug:
                logger.debug("Session %s does not exist in the data store - deleting cookie", sid)
            self.delete_cookie(request)
            get_session_context(request).session = None
            return None

        self.set_cookie(request, session.id, self.config.cookie_expiry)
        get_session_context(request).session = session
        return session

    def session(self, request: Request) -> Optional[Session]:
        return get_session_context(request).session

    def save_session(self, request: Request) -> bool:
        session = self.session(request)
        if session is None or session.deleted:
            return False
        return session.save()

    def delete_session(self, request: Request) -> None:
        ctx = get_session_context(request)
        session = ctx.session
        if isinstance(session, Session) and session.store is not None and not session.deleted:
            try:
                session.delete()
            except SessionNotFound:
                logger.debug("Session %s was already gone from the store", session.id)
        ctx.session = None
        self.delete_cookie(request)

    def cookie_path(self, request: Request) -> str:
        path = self.config.cookie_path()
        if path:
            return path
        root = request.scope.get('root_path') or ''
        return root.rstrip('/') + '/' if root else '/'

    def set_cookie(self, request: Request, value: str, expiry: Expiry) -> str:
        header = self.codec.serialize(
            self.config.cookie_name,
            value,
            path=self.cookie_path(request),
            expiry=expiry,
            domain=self.config.domain,
            secure=self.config.secure,
            httponly=self.config.httponly,
            samesite=self.config.samesite,
        )
        if self.config.debug:
            logger.debug("Baking: %s", header)
        get_session_context(request).set_cookie = header
        return header

    def delete_cookie(self, request: Request) -> str:
        return self.set_cookie(request, '', DELETE_EXPIRY)


class SessionMiddleware(BaseHTTPMiddleware):
    """Run the session manager around each request.

    Before dispatch the manager's `authenticate` hook attaches the session;
    afterwards the session is saved and the queued cookie is written to the
    response. The manager is taken from the constructor or, failing that,
    from the app's service container.
    """

    def __init__(self, app, session_manager: Optional[SessionManager] = None):
        super().__init__(app)
        self.session_manager = session_manager

    async def dispatch(self, request: Request, call_next):
        mgr = self.session_manager or resolve_service(request, 'session_manager')
        mgr.authenticate(request)

        response: Response = await call_next(request)

        mgr.save_session(request)
        header = get_session_context(request).set_cookie
        if header:
            response.headers.append('set-cookie', header)
        return response


def get_request_session(request: Request) -> Session:
    """FastAPI dependency returning the session attached to `request`.

    Raises HTTPException(401) when the request carries no session, which
    happens after a stale cookie was discarded or the session was deleted.
    """
    session = get_session_context(request).session
    if session is None:
        raise HTTPException(status_code=401, detail={'error': 'missing_session', 'message': 'No session is attached to this request.'})
    return session


def require_session(func: Callable) -> Callable:
    """Async-only decorator that ensures a session is attached.

    Preserves the wrapped function's signature so FastAPI validation still works.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        request: Optional[Request] = None
        for a in args:
            if isinstance(a, Request):
                request = a
                break
        if not request:
            request = kwargs.get('request')
        if not request:
            raise HTTPException(status_code=401, detail={'error': 'access_denied', 'message': 'Missing request.'})

        # This will raise HTTPException(401) when no session is attached
        get_request_session(request)
        return await func(*args, **kwargs)

    wrapper.__signature__ = inspect.signature(func)  # pyright: ignore[reportAttributeAccessIssue]
    return wrapper
