"""Who is asking: the role and identity behind a request.

Authentication happens outside the core; by the time an Actor reaches a
handler its role and id are trusted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fds.domain.exceptions import ValidationError


class ActorRole(Enum):
    CUSTOMER = "customer"
    OWNER = "owner"
    AGENT = "agent"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    role: ActorRole
    id: str

    def __post_init__(self) -> None:
        if not self.id or not str(self.id).strip():
            raise ValidationError("Actor id is required")

    @staticmethod
    def of(role: str, actor_id: str) -> Actor:
        try:
            return Actor(ActorRole(role.lower()), actor_id)
        except ValueError as exc:
            allowed = ", ".join(r.value for r in ActorRole)
            raise ValidationError(
                f"Unknown role {role!r} (expected one of: {allowed})"
            ) from exc
