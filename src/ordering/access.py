"""Access policy for order operations.

Identity is verified upstream; the policy receives a subject id and role claims
and answers one question per operation: may this caller proceed?

Two kinds of denial exist. Admin-only operations deny with ``ForbiddenError``.
Owner-scoped operations on a specific order deny by *concealing* the order, so
that a caller who does not own it learns nothing about whether it exists.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from protean.exceptions import ObjectNotFoundError

from ordering.exceptions import AuthenticationError, ForbiddenError


class Role(Enum):
    ADMIN = "Admin"
    USER = "User"
    MANAGER = "Manager"


class Operation(Enum):
    LIST_ORDERS = "list_orders"
    GET_ORDER = "get_order"
    LIST_MY_ORDERS = "list_my_orders"
    LIST_BY_STATUS = "list_by_status"
    CREATE_ORDER = "create_order"
    UPDATE_STATUS = "update_status"
    CANCEL_ORDER = "cancel_order"
    VIEW_REVENUE = "view_revenue"
    VIEW_COUNT = "view_count"


_ADMIN_ONLY = {
    Operation.LIST_BY_STATUS,
    Operation.UPDATE_STATUS,
    Operation.VIEW_REVENUE,
    Operation.VIEW_COUNT,
}

# Operations on a single order that only its owner (or, for reads, an admin) may see
_OWNER_SCOPED = {Operation.GET_ORDER, Operation.CANCEL_ORDER}


@dataclass(frozen=True)
class Identity:
    """A verified caller: subject id plus role claims."""

    subject_id: str | None
    roles: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_claims(cls, subject_id: str | None, roles: Iterable[str] = ()):
        cleaned = frozenset(role.strip() for role in roles if role and role.strip())
        return cls(subject_id=(subject_id or "").strip() or None, roles=cleaned)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.subject_id)

    def has_role(self, role: Role) -> bool:
        return role.value in self.roles

    @property
    def is_admin(self) -> bool:
        return self.has_role(Role.ADMIN)


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None
    conceal: bool = False

    @classmethod
    def allow(cls):
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str, conceal: bool = False):
        return cls(allowed=False, reason=reason, conceal=conceal)


def evaluate(identity: Identity, operation: Operation, order=None) -> Decision:
    """Decide whether ``identity`` may perform ``operation``.

    ``order`` is the target record for single-order operations, when the caller
    already holds it. Without it, owner-scoped operations are allowed here and
    the ownership restriction is applied by the query (see ``visibility_filter``).
    """
    if not identity.is_authenticated:
        return Decision.deny("Authentication required")

    if operation in _ADMIN_ONLY:
        if identity.is_admin:
            return Decision.allow()
        return Decision.deny("Administrator role required")

    if operation in _OWNER_SCOPED and order is not None:
        owns = str(order.owner_id) == identity.subject_id
        # Admins may read any order, but cancellation stays with the owner
        if owns or (operation == Operation.GET_ORDER and identity.is_admin):
            return Decision.allow()
        return Decision.deny("Order not found", conceal=True)

    return Decision.allow()


def enforce(identity: Identity, operation: Operation, order=None) -> Decision:
    """Evaluate and raise the matching error when the decision is a denial."""
    decision = evaluate(identity, operation, order)
    if decision.allowed:
        return decision
    if not identity.is_authenticated:
        raise AuthenticationError(decision.reason)
    if decision.conceal:
        raise ObjectNotFoundError(decision.reason)
    raise ForbiddenError(decision.reason)


def visibility_filter(identity: Identity, operation: Operation = Operation.GET_ORDER) -> str | None:
    """Owner id to restrict a query to, or None when the caller may see every order."""
    if operation != Operation.CANCEL_ORDER and identity.is_admin:
        return None
    return identity.subject_id
