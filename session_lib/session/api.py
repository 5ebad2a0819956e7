from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request
from pydantic import BaseModel
import logging

from session_lib.middleware.session import get_request_session
from session_lib.services.resolver import resolve_service
from session_lib.session.models import Session

logger = logging.getLogger(__name__)
router = APIRouter()


class SessionPayload(BaseModel):
    sessionId: str
    data: Dict[str, Any]


def _payload(session: Session) -> SessionPayload:
    return SessionPayload(sessionId=session.id, data=session.to_dict())


@router.get('/session', response_model=SessionPayload)
async def api_session_get(session: Session = Depends(get_request_session)):
    return _payload(session)


@router.put('/session', response_model=SessionPayload)
async def api_session_put(payload: Dict[str, Any] = Body(...), session: Session = Depends(get_request_session)):
    for key, value in payload.items():
        session[key] = value
    logger.debug("Updated session %s keys: %s", session.id, ', '.join(payload))
    return _payload(session)


@router.delete('/session')
async def api_session_delete(request: Request):
    mgr = resolve_service(request, 'session_manager')
    mgr.delete_session(request)
    return {'ok': True}
