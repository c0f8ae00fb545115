"""
Administrator allow-list and the FastAPI dependencies that resolve the
acting administrator from HTTP Basic credentials.

Credentials are a fixed list compared in plain text. This identifies who
performed an action for the audit log; it is not a security boundary.
Override the list with ADMIN_USERS_JSON, a JSON array of objects with
id, email, password and name.
"""

import json
import os
from typing import Optional
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import BaseModel

from enrollment.logging_config import get_logger, log_with_context, actor_var

logger = get_logger("auth")

ADMIN_ROLE = "ADMIN"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"

DEFAULT_ADMIN_USERS = [
    {"id": "1", "email": "admin@example.com", "password": "admin", "name": "Admin User"},
    {"id": "2", "email": "admin@test.com", "password": "admin", "name": "Test Admin"},
]


class Actor(BaseModel):
    """An authenticated administrator, without the password."""
    id: str
    email: str
    name: str
    role: str = ADMIN_ROLE


def load_admin_users() -> list:
    raw = os.getenv("ADMIN_USERS_JSON")
    if not raw:
        return DEFAULT_ADMIN_USERS
    return json.loads(raw)


ADMIN_USERS = load_admin_users()


def authenticate(email: str, password: str, users=None) -> Optional[Actor]:
    """Return the matching administrator, or None."""
    for user in (ADMIN_USERS if users is None else users):
        if user["email"] == email and user["password"] == password:
            return Actor(id=str(user["id"]), email=user["email"], name=user["name"],
                         role=user.get("role", ADMIN_ROLE))
    return None


security = HTTPBasic(auto_error=False)


async def get_current_actor(
    credentials: Optional[HTTPBasicCredentials] = Depends(security)
) -> Optional[Actor]:
    """Resolve the administrator behind the request, if any."""
    if credentials is None:
        return None
    actor = authenticate(credentials.username, credentials.password)
    if actor is None:
        log_with_context(logger, "WARNING", "Rejected admin credentials",
                         context={"email": credentials.username})
        return None
    actor_var.set(actor.email)
    return actor


def require_admin(actor: Optional[Actor] = Depends(get_current_actor)) -> Actor:
    """Dependency for admin-only routes: 401 unless an administrator is present."""
    if actor is None or actor.role != ADMIN_ROLE:
        raise HTTPException(
            status_code=401,
            detail="Administrator credentials required",
            headers={"WWW-Authenticate": "Basic"}
        )
    return actor
