"""
Login route - checks a pair of credentials against the admin allow-list.

There are no sessions or tokens: clients send the same credentials with
HTTP Basic on each admin request. This endpoint lets a client confirm them
once and learn the administrator's display name.
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from enrollment.auth import Actor, authenticate, INVALID_CREDENTIALS_MESSAGE
from enrollment.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("auth")


class LoginRequest(BaseModel):
    """Schema for a login attempt."""
    email: str
    password: str


@router.post("/api/login", response_model=Actor)
def login(request: LoginRequest):
    """Return the administrator for valid credentials, 401 otherwise."""
    actor = authenticate(request.email, request.password)
    if actor is None:
        log_with_context(logger, "WARNING", "Login failed",
                         context={"email": request.email})
        raise HTTPException(status_code=401, detail=INVALID_CREDENTIALS_MESSAGE)

    log_with_context(logger, "INFO", "Login succeeded",
                     context={"email": actor.email})
    return actor
