"""
Request dependencies shared by the API routes.
"""

from fastapi import Request

from ..engine import Session


async def get_session(request: Request) -> Session:
    """
    Session attached to the request by the authentication layer.

    Requests that were not authenticated upstream run as anonymous.
    """
    session = getattr(request.state, "session", None)
    if session is None:
        return Session.anonymous()
    return session
