from .session import (
	OK,
	SessionContext,
	SessionManager,
	SessionMiddleware,
	get_request_session,
	get_session_context,
	require_session,
)

__all__ = [
	"OK",
	"SessionContext",
	"SessionManager",
	"SessionMiddleware",
	"get_request_session",
	"get_session_context",
	"require_session",
]
