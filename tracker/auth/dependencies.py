from fastapi import Depends, Request

from tracker import config
from tracker.auth.sessions import SessionRegistry, SessionUser
from tracker.errors import UnauthorizedError


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.session_registry


def get_session_tokens(request: Request) -> list[str]:
    """Candidate session tokens: the cookie first, then an ``Authorization: Bearer`` header."""
    tokens = []
    cookie = request.cookies.get(config.SESSION_COOKIE_NAME)
    if cookie:
        tokens.append(cookie)

    authorization = request.headers.get("Authorization", "")
    if authorization.lower().startswith("bearer "):
        bearer = authorization.split(" ", 1)[1].strip()
        if bearer and bearer not in tokens:
            tokens.append(bearer)
    return tokens


async def get_current_user(
    request: Request,
    tokens: list[str] = Depends(get_session_tokens),
    registry: SessionRegistry = Depends(get_session_registry),
) -> SessionUser:
    """Return the user of the first token that validates.

    The matching token is kept on ``request.state.session_token`` for logout.
    """
    for token in tokens:
        user = await registry.validate(token)
        if user is not None:
            request.state.session_token = token
            return user
    raise UnauthorizedError()
