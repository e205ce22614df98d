# backend/coaching/routers/deps.py
"""
Caller identity.

Authentication happens upstream (auth provider / gateway); it forwards the
verified user in X-User-Id and X-User-Role. Requests without them are
treated as anonymous.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from ..config import settings


@dataclass(frozen=True)
class Caller:
    user_id: Optional[str]
    role: Optional[str]

    @property
    def is_admin(self) -> bool:
        return self.role == settings.admin_role


def get_caller(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> Caller:
    return Caller(user_id=x_user_id, role=x_user_role)


def require_client(caller: Caller = Depends(get_caller)) -> Caller:
    if not caller.user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return caller


def require_admin(caller: Caller = Depends(get_caller)) -> Caller:
    if not caller.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )
    return caller
