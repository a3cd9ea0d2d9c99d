# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS (CLINIC STAFF JOB ROLES)
# =========================================================
ROLE_ADMIN = "admin"
ROLE_ACCOUNTANT = "accountant"
ROLE_OPTICS_SELLER = "optics_seller"
ROLE_MEDICINE_SELLER = "medicine_seller"
ROLE_RECEPTIONIST = "receptionist"

STAFF_ROLES = {
    ROLE_ADMIN,
    ROLE_ACCOUNTANT,
    ROLE_OPTICS_SELLER,
    ROLE_MEDICINE_SELLER,
    ROLE_RECEPTIONIST,
}


# =========================================================
# CAPABILITIES
# =========================================================
# Views protect capabilities, not raw roles.
CAP_LEDGER_POST = "ledger.post"          # income/expense/fund postings + edits
CAP_LEDGER_REVERSE = "ledger.reverse"    # deletes (balance reversal)
CAP_REPORTS_VIEW_LEDGER = "reports.view_ledger"

CAP_POS_SELL = "pos.sell"
CAP_POS_COLLECT = "pos.collect"          # due payments + status changes
CAP_POS_VOID = "pos.void"                # sale deletion with stock restore

CAP_INVENTORY_VIEW = "inventory.view"
CAP_INVENTORY_EDIT = "inventory.edit"

ALL_CAPABILITIES = {
    CAP_LEDGER_POST,
    CAP_LEDGER_REVERSE,
    CAP_REPORTS_VIEW_LEDGER,
    CAP_POS_SELL,
    CAP_POS_COLLECT,
    CAP_POS_VOID,
    CAP_INVENTORY_VIEW,
    CAP_INVENTORY_EDIT,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_ACCOUNTANT: {
        CAP_LEDGER_POST,
        CAP_LEDGER_REVERSE,
        CAP_REPORTS_VIEW_LEDGER,
        CAP_INVENTORY_VIEW,
    },
    ROLE_OPTICS_SELLER: {
        CAP_POS_SELL,
        CAP_POS_COLLECT,
        CAP_INVENTORY_VIEW,
    },
    ROLE_MEDICINE_SELLER: {
        CAP_POS_SELL,
        CAP_POS_COLLECT,
        CAP_INVENTORY_VIEW,
        CAP_INVENTORY_EDIT,
    },
    ROLE_RECEPTIONIST: {
        CAP_POS_COLLECT,
        CAP_INVENTORY_VIEW,
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def effective_capabilities_for(user) -> set[str]:
    if getattr(user, "is_superuser", False):
        return set(ALL_CAPABILITIES)
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


def user_has_capability(user, capability: str) -> bool:
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return capability in effective_capabilities_for(user)


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_POS_SELL

    Views with per-method needs may define `required_capabilities`
    as {"POST": CAP_LEDGER_POST, "DELETE": CAP_LEDGER_REVERSE, ...}.
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        per_method = getattr(view, "required_capabilities", None) or {}
        required = per_method.get(request.method) or getattr(
            view, "required_capability", None
        )
        if not required:
            # deny-by-default
            return False

        return required in effective_capabilities_for(user)


class HasAnyCapability(BasePermission):
    """
    Require ANY capability from `view.required_any_capabilities`.
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_any_capabilities", None)
        if not required:
            return False

        caps = effective_capabilities_for(user)
        return any(cap in caps for cap in set(required))
