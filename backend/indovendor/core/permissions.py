# backend/indovendor/core/permissions.py
"""
Control de acceso basado en roles (RBAC) para IndoVendor.

Cada rol tiene una lista fija de permisos `recurso:acción`. Sobre esa tabla
se aplica una comprobación de propiedad: para ciertos permisos el recurso
solo es accesible si su `user_id` coincide con el del usuario autenticado.
SUPERADMIN nunca pasa por la comprobación de propiedad.
"""

import enum
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional


class UserRole(str, enum.Enum):
    SUPERADMIN = "SUPERADMIN"
    VENDOR = "VENDOR"
    CLIENT = "CLIENT"


class Permission(str, enum.Enum):
    # Usuarios
    USER_CREATE = "user:create"
    USER_READ = "user:read"
    USER_UPDATE = "user:update"
    USER_DELETE = "user:delete"
    USER_VERIFY = "user:verify"

    # Productos
    PRODUCT_CREATE = "product:create"
    PRODUCT_READ = "product:read"
    PRODUCT_UPDATE = "product:update"
    PRODUCT_DELETE = "product:delete"
    PRODUCT_FEATURE = "product:feature"

    # Pedidos
    ORDER_CREATE = "order:create"
    ORDER_READ = "order:read"
    ORDER_UPDATE = "order:update"
    ORDER_CANCEL = "order:cancel"
    ORDER_ACCEPT = "order:accept"
    ORDER_COMPLETE = "order:complete"

    # Pagos y escrow
    PAYMENT_PROCESS = "payment:process"
    PAYMENT_REFUND = "payment:refund"
    PAYMENT_RELEASE = "payment:release"
    ESCROW_MANAGE = "escrow:manage"

    # Chat
    CHAT_READ = "chat:read"
    CHAT_SEND = "chat:send"
    CHAT_MONITOR = "chat:monitor"

    # Reseñas
    REVIEW_CREATE = "review:create"
    REVIEW_READ = "review:read"
    REVIEW_MODERATE = "review:moderate"

    # Disputas
    DISPUTE_CREATE = "dispute:create"
    DISPUTE_READ = "dispute:read"
    DISPUTE_RESOLVE = "dispute:resolve"

    # Administración
    ADMIN_DASHBOARD = "admin:dashboard"
    ADMIN_ANALYTICS = "admin:analytics"
    ADMIN_MONITOR = "admin:monitor"

    # Perfil
    PROFILE_READ = "profile:read"
    PROFILE_UPDATE = "profile:update"


# ========================================
# TABLA ROL -> PERMISOS
# ========================================

ROLE_PERMISSIONS: Dict[UserRole, List[Permission]] = {
    UserRole.SUPERADMIN: list(Permission),
    UserRole.VENDOR: [
        Permission.PRODUCT_CREATE,
        Permission.PRODUCT_READ,
        Permission.PRODUCT_UPDATE,
        Permission.PRODUCT_DELETE,
        Permission.PRODUCT_FEATURE,
        Permission.ORDER_READ,
        Permission.ORDER_ACCEPT,
        Permission.ORDER_UPDATE,
        Permission.ORDER_COMPLETE,
        Permission.CHAT_READ,
        Permission.CHAT_SEND,
        Permission.REVIEW_READ,
        Permission.DISPUTE_CREATE,
        Permission.DISPUTE_READ,
        Permission.PROFILE_READ,
        Permission.PROFILE_UPDATE,
    ],
    UserRole.CLIENT: [
        Permission.PRODUCT_READ,
        Permission.ORDER_CREATE,
        Permission.ORDER_READ,
        Permission.ORDER_CANCEL,
        Permission.PAYMENT_PROCESS,
        Permission.PAYMENT_RELEASE,
        Permission.CHAT_READ,
        Permission.CHAT_SEND,
        Permission.REVIEW_CREATE,
        Permission.REVIEW_READ,
        Permission.DISPUTE_CREATE,
        Permission.DISPUTE_READ,
        Permission.PROFILE_READ,
        Permission.PROFILE_UPDATE,
    ],
}

_VENDOR_OWNED = {Permission.ORDER_ACCEPT, Permission.ORDER_COMPLETE}
_CLIENT_OWNED = {Permission.ORDER_CREATE, Permission.ORDER_CANCEL, Permission.REVIEW_CREATE}


@dataclass(frozen=True)
class PermissionResult:
    allowed: bool
    reason: Optional[str] = None


ALLOWED = PermissionResult(allowed=True)


def _owner_id(resource: Any) -> Optional[str]:
    """Extrae `user_id` de un objeto o de un diccionario."""
    if isinstance(resource, Mapping):
        return resource.get("user_id")
    return getattr(resource, "user_id", None)


def get_role_permissions(role: UserRole) -> List[Permission]:
    return list(ROLE_PERMISSIONS.get(UserRole(role), []))


def check_resource_ownership(
    role: UserRole,
    permission: Permission,
    user_id: Optional[str],
    resource: Any,
) -> PermissionResult:
    """
    Verifica que el recurso pertenezca al usuario para los permisos sujetos
    a propiedad.

    - Permisos de producto y aceptación/cierre de pedidos (VENDOR)
    - Creación/cancelación de pedidos y creación de reseñas (CLIENT)
    - Cualquier permiso de perfil

    El resto de permisos no dependen de la propiedad.
    """
    role = UserRole(role)
    permission = Permission(permission)
    is_owner = user_id is not None and _owner_id(resource) == user_id

    if role == UserRole.VENDOR and (permission.value.startswith("product:") or permission in _VENDOR_OWNED):
        if not is_owner:
            return PermissionResult(False, "You can only access your own vendor resources")
        return ALLOWED

    if role == UserRole.CLIENT and permission in _CLIENT_OWNED:
        if not is_owner:
            return PermissionResult(False, "You can only access your own client resources")
        return ALLOWED

    if permission.value.startswith("profile:"):
        if not is_owner:
            return PermissionResult(False, "You can only access your own profile")
        return ALLOWED

    return ALLOWED


def has_permission(
    role: UserRole,
    permission: Permission,
    user_id: Optional[str] = None,
    resource: Any = None,
) -> PermissionResult:
    """
    Evalúa si un rol puede ejercer un permiso, opcionalmente sobre un recurso.

    La falta del permiso se informa siempre antes que la falta de propiedad.
    """
    role = UserRole(role)
    permission = Permission(permission)

    if permission not in ROLE_PERMISSIONS.get(role, []):
        return PermissionResult(False, f"Role {role.value} does not have permission {permission.value}")

    if resource is not None and role != UserRole.SUPERADMIN:
        return check_resource_ownership(role, permission, user_id, resource)

    return ALLOWED


def has_any_permission(role: UserRole, permissions: Iterable[Permission]) -> PermissionResult:
    role = UserRole(role)
    required = [Permission(p) for p in permissions]
    granted = ROLE_PERMISSIONS.get(role, [])
    if any(p in granted for p in required):
        return ALLOWED
    names = ", ".join(p.value for p in required)
    return PermissionResult(False, f"Role {role.value} does not have any of the required permissions: {names}")


def has_all_permissions(
    role: UserRole,
    permissions: Iterable[Permission],
    user_id: Optional[str] = None,
    resource: Any = None,
) -> PermissionResult:
    for permission in permissions:
        result = has_permission(role, permission, user_id, resource)
        if not result.allowed:
            return result
    return ALLOWED


def can_access_resource(
    role: UserRole,
    resource_type: str,
    action: str,
    user_id: Optional[str] = None,
    resource: Any = None,
) -> PermissionResult:
    """Atajo `recurso` + `acción` sobre `has_permission`."""
    name = f"{resource_type}:{action}"
    try:
        permission = Permission(name)
    except ValueError:
        return PermissionResult(False, f"Unknown permission {name}")
    return has_permission(role, permission, user_id, resource)
