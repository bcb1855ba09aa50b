from __future__ import annotations

from dataclasses import dataclass

from .enums import Role
from .exceptions import AuthorizationError


@dataclass(frozen=True)
class Scope:
    """Owning HR account on whose behalf an operation runs.

    Every read and write is filtered by ``hr_id``.
    """

    hr_id: int
    role: Role = Role.HR

    def require_hr(self) -> None:
        if self.role != Role.HR:
            raise AuthorizationError("You do not have permission to perform this action")
