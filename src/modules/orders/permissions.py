"""Who may change what on an order.

One ``RolePolicy`` per role, looked up in ``ROLE_POLICIES`` by
``authorize_update``.  Each policy states the request fields the role may
send, the statuses it may request, its scope (own orders, orders containing
its items, or all) and whether ``VALID_TRANSITIONS`` binds it.
``authorize_update`` raises before anything is mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, FrozenSet, Iterable, Optional

from modules.accounts.models import UserRole
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import OrderNotCancellable, OrderPermissionDenied

if TYPE_CHECKING:
    from modules.accounts.dtos import ActorDTO
    from modules.orders.models import Order


class Scope:
    OWN = "own"
    VENDOR_ITEMS = "vendor_items"
    ALL = "all"


@dataclass(frozen=True)
class RolePolicy:
    role: str
    scope: str
    allowed_fields: FrozenSet[str]
    # ``None`` means any status the state machine accepts.
    allowed_statuses: Optional[FrozenSet[str]] = None
    requires_pending: bool = False
    can_reactivate: bool = True
    # Admins may move an order between any two statuses.
    follows_state_machine: bool = True
    status_message: str = "You do not have permission to set this status"
    fields_message: str = "Invalid update fields"

    def allows_status(self, status: str) -> bool:
        return self.allowed_statuses is None or status in self.allowed_statuses


ROLE_POLICIES: dict[str, RolePolicy] = {
    UserRole.CUSTOMER: RolePolicy(
        role=UserRole.CUSTOMER,
        scope=Scope.OWN,
        allowed_fields=frozenset({"status", "cancel_reason"}),
        allowed_statuses=frozenset({OrderStatus.CANCELLED}),
        requires_pending=True,
        can_reactivate=False,
        status_message="Customers can only cancel orders",
        fields_message="Customers can only cancel orders",
    ),
    UserRole.VENDOR: RolePolicy(
        role=UserRole.VENDOR,
        scope=Scope.VENDOR_ITEMS,
        allowed_fields=frozenset({"status", "tracking_number", "notes"}),
        can_reactivate=False,
        status_message="Vendors cannot re-activate cancelled orders",
        fields_message="Invalid update fields for vendor",
    ),
    UserRole.ADMIN: RolePolicy(
        role=UserRole.ADMIN,
        scope=Scope.ALL,
        allowed_fields=frozenset(
            {"status", "tracking_number", "notes", "cancel_reason"}
        ),
        follows_state_machine=False,
    ),
}


def policy_for(actor: ActorDTO) -> RolePolicy:
    try:
        return ROLE_POLICIES[actor.role]
    except KeyError:
        raise OrderPermissionDenied() from None


def in_scope(order: Order, actor: ActorDTO) -> bool:
    """Whether ``actor`` may see ``order`` at all."""
    scope = policy_for(actor).scope
    if scope == Scope.ALL:
        return True
    if scope == Scope.OWN:
        return str(order.user_id) == str(actor.user_id)
    return order.has_vendor(actor.user_id)


def authorize_update(
    order: Order,
    actor: ActorDTO,
    fields: Iterable[str],
    requested_status: Optional[str],
) -> RolePolicy:
    """Check one update request against the actor's policy.

    Raises:
        OrderPermissionDenied: field, status or scope not allowed (403).
        OrderNotCancellable: a customer cancelling a non-pending order (400).
    """
    policy = policy_for(actor)

    disallowed = set(fields) - policy.allowed_fields
    if disallowed:
        raise OrderPermissionDenied(policy.fields_message)

    if requested_status is not None and not policy.allows_status(requested_status):
        raise OrderPermissionDenied(policy.status_message)

    if not in_scope(order, actor):
        raise OrderPermissionDenied("Unauthorized")

    if policy.requires_pending and order.status != OrderStatus.PENDING:
        raise OrderNotCancellable("Can only cancel pending orders")

    if (
        requested_status is not None
        and not policy.can_reactivate
        and order.status == OrderStatus.CANCELLED
        and requested_status != OrderStatus.CANCELLED
    ):
        raise OrderPermissionDenied(policy.status_message)

    return policy
