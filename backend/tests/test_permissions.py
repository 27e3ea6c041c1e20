from indovendor.core.permissions import (
    Permission,
    UserRole,
    can_access_resource,
    get_role_permissions,
    has_all_permissions,
    has_any_permission,
    has_permission,
)


def test_superadmin_has_every_permission():
    assert set(get_role_permissions(UserRole.SUPERADMIN)) == set(Permission)


def test_client_cannot_create_products():
    result = has_permission(UserRole.CLIENT, Permission.PRODUCT_CREATE)
    assert not result.allowed
    assert result.reason == "Role CLIENT does not have permission product:create"


def test_vendor_product_permission_requires_ownership():
    own = has_permission(UserRole.VENDOR, Permission.PRODUCT_UPDATE, "u1", {"user_id": "u1"})
    other = has_permission(UserRole.VENDOR, Permission.PRODUCT_UPDATE, "u1", {"user_id": "u2"})
    assert own.allowed
    assert not other.allowed
    assert other.reason == "You can only access your own vendor resources"


def test_superadmin_bypasses_ownership():
    result = has_permission(UserRole.SUPERADMIN, Permission.PRODUCT_DELETE, "admin", {"user_id": "someone"})
    assert result.allowed


def test_client_order_creation_requires_ownership():
    result = has_permission(UserRole.CLIENT, Permission.ORDER_CREATE, "c1", {"user_id": "c2"})
    assert not result.allowed
    assert result.reason == "You can only access your own client resources"


def test_profile_permission_checks_owner_for_any_role():
    result = has_permission(UserRole.CLIENT, Permission.PROFILE_UPDATE, "c1", {"user_id": "c2"})
    assert result.reason == "You can only access your own profile"


def test_ownership_accepts_objects_with_user_id():
    class Resource:
        user_id = "v1"

    assert has_permission(UserRole.VENDOR, Permission.PRODUCT_DELETE, "v1", Resource()).allowed


def test_permission_without_resource_skips_ownership():
    assert has_permission(UserRole.VENDOR, Permission.PRODUCT_UPDATE).allowed


def test_has_any_permission():
    assert has_any_permission(UserRole.CLIENT, [Permission.PRODUCT_CREATE, Permission.PRODUCT_READ]).allowed
    denied = has_any_permission(UserRole.CLIENT, [Permission.ADMIN_DASHBOARD, Permission.USER_VERIFY])
    assert not denied.allowed
    assert "admin:dashboard, user:verify" in denied.reason


def test_has_all_permissions_reports_first_failure():
    result = has_all_permissions(UserRole.VENDOR, [Permission.PRODUCT_READ, Permission.USER_VERIFY])
    assert not result.allowed
    assert result.reason == "Role VENDOR does not have permission user:verify"


def test_can_access_resource():
    assert can_access_resource(UserRole.CLIENT, "review", "create", "c1", {"user_id": "c1"}).allowed
    unknown = can_access_resource(UserRole.SUPERADMIN, "rocket", "launch")
    assert not unknown.allowed
    assert unknown.reason == "Unknown permission rocket:launch"
