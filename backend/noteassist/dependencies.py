"""
NoteAssist Backend — Request Dependencies
===========================================

What:  FastAPI dependencies for the caller identity and the AI assist service.
Who:   Injected into route handlers with Depends().

Identity:
    The upstream auth gateway verifies the session and sets a trusted header
    (X-User-Id by default) on every request it forwards. This service
    trusts that header and performs no credential verification itself.

Assist service:
    Built by create_app() and stored on app.state, so tests can construct
    an app around a fake provider.
"""

from fastapi import Request

from noteassist.config import settings
from noteassist.exceptions import ConfigurationError, UnauthorizedError
from noteassist.services.assist_service import AssistService


async def get_current_user_id(request: Request) -> str:
    """
    Caller identity from the gateway header.

    Raises:
        UnauthorizedError: header missing or blank. Raised while resolving
            dependencies, so no store access happens for the request.
    """
    user_id = (request.headers.get(settings.identity_header) or "").strip()
    if not user_id:
        raise UnauthorizedError(context={"header": settings.identity_header})
    return user_id


async def get_assist_service(request: Request) -> AssistService:
    service = getattr(request.app.state, "assist_service", None)
    if service is None:
        raise ConfigurationError(context={"missing": "app.state.assist_service"})
    return service
