# backend/app/auth.py
"""
Caller identity as forwarded by the gateway.

The gateway authenticates the session and sets:
  X-User-Id   : resident/admin id (opaque string)
  X-User-Role : "resident" (default) or "admin"
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
RESIDENT_ROLE = "resident"


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: str = RESIDENT_ROLE

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def get_actor(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> Actor:
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity",
        )
    role = (x_user_role or RESIDENT_ROLE).lower()
    return Actor(user_id=x_user_id, role=role)


def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    if not actor.is_admin:
        logger.warning(f"Admin endpoint called by non-admin user {actor.user_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return actor
