from typing import Protocol, Optional, runtime_checkable

from starlette.requests import Request

from session_lib.session.models import Session


@runtime_checkable
class SessionManagerProtocol(Protocol):
    """Session manager public interface used by request handlers and middleware.

    The real `SessionManager` in `session_lib.middleware.session` exposes
    these methods; custom authentication code should call `get_session`
    (or `authenticate`) itself when it replaces the middleware.
    """

    def authenticate(self, request: Request) -> int: ...

    def get_session(self, request: Request) -> Optional[Session]: ...

    def session(self, request: Request) -> Optional[Session]: ...

    def save_session(self, request: Request) -> bool: ...

    def delete_session(self, request: Request) -> None: ...
