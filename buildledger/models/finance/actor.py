"""Actor (acting user) model and permission predicate."""

from dataclasses import dataclass, field

from buildledger.models.finance.enums import Permission


@dataclass(frozen=True)
class Actor:
    """The user performing an action, with an explicit permission set."""

    actor_id: str
    name: str = ""
    permissions: frozenset[Permission] = field(default_factory=frozenset)
    is_authenticated: bool = True

    @classmethod
    def with_permissions(cls, actor_id: str, *codes: Permission | str, name: str = "") -> "Actor":
        """Build an actor from permission codes (enum members or raw strings)."""
        return cls(
            actor_id=actor_id,
            name=name,
            permissions=frozenset(Permission(c) for c in codes),
        )


def has_permission(actor: Actor | None, code: Permission) -> bool:
    """Return True if ``actor`` may perform actions guarded by ``code``.

    SYS_ADMIN implies every permission. Missing or unauthenticated actors
    hold nothing.
    """
    if actor is None or not actor.is_authenticated:
        return False
    if Permission.SYS_ADMIN in actor.permissions:
        return True
    return code in actor.permissions
