# khonreep/routes/deps.py
from fastapi import Request

from khonreep.services.session import ReporterSession


async def get_session(request: Request) -> ReporterSession:
    """
    Session for this browser; a new one on first contact. The cookie for a
    new session is written by the middleware in main.py so it also rides
    on error responses.
    """
    settings = request.app.state.settings
    registry = request.app.state.sessions

    session = registry.get(request.cookies.get(settings.session_cookie))
    if session is None:
        session = registry.create()
        request.state.new_session_id = session.id
    return session
