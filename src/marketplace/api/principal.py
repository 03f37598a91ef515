"""Authenticated caller, as forwarded by the upstream auth gateway."""

from dataclasses import dataclass

from fastapi import Header, HTTPException

from marketplace.errors import AuthorizationError
from marketplace.order.queries import Role
from marketplace.utils.logging import add_context


@dataclass(frozen=True)
class Principal:
    id: str
    role: Role


def get_principal(
    x_principal_id: str | None = Header(default=None),
    x_principal_role: str | None = Header(default=None),
) -> Principal:
    if not x_principal_id or not x_principal_role:
        raise HTTPException(status_code=401, detail="Missing principal headers")
    try:
        role = Role(x_principal_role)
    except ValueError:
        raise HTTPException(status_code=401, detail=f"Unknown role: {x_principal_role}") from None

    add_context(principal_id=x_principal_id, principal_role=role.value)
    return Principal(id=x_principal_id, role=role)


def require_role(*roles: Role):
    """Dependency factory that admits only the given roles."""

    def dependency(
        x_principal_id: str | None = Header(default=None),
        x_principal_role: str | None = Header(default=None),
    ) -> Principal:
        principal = get_principal(x_principal_id, x_principal_role)
        if principal.role not in roles:
            raise AuthorizationError(f"Role {principal.role.value} may not perform this operation")
        return principal

    return dependency
