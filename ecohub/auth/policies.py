"""Declarative role checks attached to routes.

A policy is a FastAPI dependency evaluated before the handler body::

    @router.post('/', dependencies=[Depends(require_admin)])

It resolves the caller through ``get_current_user`` (401 when the token is
missing or invalid) and then compares the caller's stored role against the
roles the policy allows (403 otherwise).
"""

from typing import Callable

from fastapi import Depends

from ecohub.auth.dependencies import get_current_user
from ecohub.core.errors import ForbiddenError
from ecohub.models.user import User


def require_roles(*roles: str, message: str = 'Access denied') -> Callable[..., User]:
    allowed = frozenset(roles)

    def policy(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise ForbiddenError(message)
        return current_user

    policy.__name__ = f"require_{'_or_'.join(sorted(allowed))}"
    return policy


require_admin = require_roles('admin', message='Admin access required')
require_seller = require_roles('seller', 'admin', message='Seller access required')


def is_owner_or_admin(current_user: User, owner_id: int) -> bool:
    return current_user.id == owner_id or current_user.role == 'admin'
