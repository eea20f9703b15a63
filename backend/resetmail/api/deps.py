"""FastAPI dependencies for the mail components built at startup.

Host application routes take the dispatcher through ``Depends(get_dispatcher)``.
"""

from fastapi import HTTPException, Request

from resetmail.mail.configurator import MailTransportState
from resetmail.mail.dispatcher import PasswordResetDispatcher


def get_transport_state(request: Request) -> MailTransportState:
    state = getattr(request.app.state, "mail_state", None)
    if state is None:
        raise HTTPException(status_code=503, detail="Mail transport not initialized")
    return state


def get_dispatcher(request: Request) -> PasswordResetDispatcher:
    """Dispatcher built once by the application lifespan."""
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise HTTPException(status_code=503, detail="Mail dispatcher not initialized")
    return dispatcher
