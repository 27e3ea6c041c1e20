import pytest_asyncio

from indovendor.core.config import settings
from indovendor.core.permissions import UserRole
from indovendor.crud import category_crud, product_crud
from indovendor.schemas.category_schema import CategoryCreate

API = settings.API_STR


@pytest_asyncio.fixture
async def categories(session_maker):
    """Seis categorías activas y una inactiva."""
    created = {}
    async with session_maker() as session:
        for name in ["Catering", "Decoration", "Entertainment", "Photography", "Venue", "Wedding Organizer"]:
            slug = name.lower().replace(" ", "-")
            created[slug] = await category_crud.create_category(session, CategoryCreate(name=name), slug=slug)
        created["retired"] = await category_crud.create_category(
            session, CategoryCreate(name="Retired", is_active=False), slug="retired"
        )
    return created


async def test_list_categories_ordered_by_name(client, categories):
    response = await client.get(f"{API}/categories/")
    assert response.status_code == 200
    names = [c["name"] for c in response.json()["data"]]
    assert names == sorted(names)
    assert len(names) == 7


async def test_active_categories(client, categories):
    response = await client.get(f"{API}/categories/active")
    slugs = {c["slug"] for c in response.json()["data"]}
    assert "retired" not in slugs
    assert len(slugs) == 6


async def test_get_category(client, categories):
    response = await client.get(f"{API}/categories/{categories['catering'].id}")
    assert response.json()["data"]["slug"] == "catering"

    missing = await client.get(f"{API}/categories/nope")
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "message": "Category not found"}

# ========================================
# ADMINISTRACIÓN
# ========================================

async def test_admin_creates_category_with_generated_slug(client, create_user, headers_for):
    admin = await create_user(role=UserRole.SUPERADMIN)
    response = await client.post(
        f"{API}/categories/admin",
        json={"name": "Makeup Artist", "icon": "💄"},
        headers=headers_for(admin),
    )
    assert response.status_code == 201
    assert response.json()["data"]["slug"] == "makeup-artist"
    assert response.json()["data"]["is_active"] is True


async def test_admin_duplicate_slug(client, create_user, headers_for, categories):
    admin = await create_user(role=UserRole.SUPERADMIN)
    response = await client.post(
        f"{API}/categories/admin",
        json={"name": "Catering Deluxe", "slug": "catering"},
        headers=headers_for(admin),
    )
    assert response.status_code == 409
    assert response.json()["message"] == "Category with slug 'catering' already exists"


async def test_admin_slug_pattern_is_enforced(client, create_user, headers_for):
    admin = await create_user(role=UserRole.SUPERADMIN)
    response = await client.post(
        f"{API}/categories/admin",
        json={"name": "Bad Slug", "slug": "Bad Slug"},
        headers=headers_for(admin),
    )
    assert response.status_code == 422


async def test_vendor_cannot_manage_catalog(client, create_user, headers_for):
    vendor = await create_user(role=UserRole.VENDOR)
    response = await client.post(f"{API}/categories/admin", json={"name": "Nope"}, headers=headers_for(vendor))
    assert response.status_code == 403


async def test_admin_updates_category(client, create_user, headers_for, categories):
    admin = await create_user(role=UserRole.SUPERADMIN)
    target = categories["venue"]
    response = await client.put(
        f"{API}/categories/admin/{target.id}",
        json={"description": "Ballrooms and gardens", "is_active": False},
        headers=headers_for(admin),
    )
    assert response.status_code == 200
    assert response.json()["data"]["description"] == "Ballrooms and gardens"
    assert response.json()["data"]["is_active"] is False

    clash = await client.put(
        f"{API}/categories/admin/{target.id}",
        json={"slug": "catering"},
        headers=headers_for(admin),
    )
    assert clash.status_code == 409


async def test_admin_update_rejects_null_required_fields(client, create_user, headers_for, categories):
    admin = await create_user(role=UserRole.SUPERADMIN)
    target = categories["venue"]
    for field in ("name", "slug", "is_active"):
        response = await client.put(
            f"{API}/categories/admin/{target.id}",
            json={field: None},
            headers=headers_for(admin),
        )
        assert response.status_code == 422, field
        assert response.json()["errors"][0]["field"] == field

    unchanged = await client.get(f"{API}/categories/{target.id}")
    assert unchanged.json()["data"]["name"] == "Venue"
    assert unchanged.json()["data"]["is_active"] is True


async def test_admin_delete_blocked_by_products(client, create_user, headers_for, categories, session_maker):
    admin = await create_user(role=UserRole.SUPERADMIN)
    vendor_user = await create_user(role=UserRole.VENDOR)
    category = categories["catering"]
    async with session_maker() as session:
        await product_crud.create_product(
            session, vendor_user.vendor.id, {"category_id": category.id, "name": "Buffet", "base_price": 100}
        )

    response = await client.delete(f"{API}/categories/admin/{category.id}", headers=headers_for(admin))
    assert response.status_code == 409
    assert response.json()["message"] == "Cannot delete category with associated products. Reassign products first."

    free = await client.delete(f"{API}/categories/admin/{categories['venue'].id}", headers=headers_for(admin))
    assert free.status_code == 200
    assert (await client.get(f"{API}/categories/{categories['venue'].id}")).status_code == 404

# ========================================
# CATEGORÍAS DEL VENDEDOR
# ========================================

async def test_vendor_adds_and_removes_category(client, create_user, headers_for, categories):
    vendor = await create_user(role=UserRole.VENDOR)
    headers = headers_for(vendor)
    category_id = categories["catering"].id

    added = await client.post(f"{API}/categories/vendor", json={"category_id": category_id}, headers=headers)
    assert added.status_code == 201
    assert added.json()["data"]["category"]["slug"] == "catering"

    duplicate = await client.post(f"{API}/categories/vendor", json={"category_id": category_id}, headers=headers)
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "Vendor already has this category"

    mine = await client.get(f"{API}/categories/vendor/mine", headers=headers)
    assert [link["category_id"] for link in mine.json()["data"]] == [category_id]

    removed = await client.delete(f"{API}/categories/vendor/{category_id}", headers=headers)
    assert removed.status_code == 200

    again = await client.delete(f"{API}/categories/vendor/{category_id}", headers=headers)
    assert again.status_code == 404
    assert again.json()["message"] == "Vendor does not have this category"


async def test_vendor_cannot_add_inactive_or_unknown_category(client, create_user, headers_for, categories):
    vendor = await create_user(role=UserRole.VENDOR)
    headers = headers_for(vendor)

    inactive = await client.post(
        f"{API}/categories/vendor", json={"category_id": categories["retired"].id}, headers=headers
    )
    assert inactive.status_code == 400
    assert inactive.json()["message"] == "Cannot add inactive category"

    unknown = await client.post(f"{API}/categories/vendor", json={"category_id": "nope"}, headers=headers)
    assert unknown.status_code == 404


async def test_vendor_category_limit(client, create_user, headers_for, categories):
    vendor = await create_user(role=UserRole.VENDOR)
    headers = headers_for(vendor)
    slugs = ["catering", "decoration", "entertainment", "photography", "venue"]
    for slug in slugs:
        response = await client.post(f"{API}/categories/vendor", json={"category_id": categories[slug].id}, headers=headers)
        assert response.status_code == 201

    sixth = await client.post(
        f"{API}/categories/vendor", json={"category_id": categories["wedding-organizer"].id}, headers=headers
    )
    assert sixth.status_code == 400
    assert sixth.json()["message"] == "Maximum 5 categories allowed"


async def test_vendor_replaces_categories(client, create_user, headers_for, categories):
    vendor = await create_user(role=UserRole.VENDOR)
    headers = headers_for(vendor)
    await client.post(f"{API}/categories/vendor", json={"category_id": categories["venue"].id}, headers=headers)

    ids = [categories["catering"].id, categories["decoration"].id, categories["catering"].id]
    response = await client.put(f"{API}/categories/vendor", json={"category_ids": ids}, headers=headers)
    assert response.status_code == 200
    assert {link["category_id"] for link in response.json()["data"]} == {
        categories["catering"].id,
        categories["decoration"].id,
    }


async def test_vendor_replace_validation(client, create_user, headers_for, categories):
    vendor = await create_user(role=UserRole.VENDOR)
    headers = headers_for(vendor)

    too_many = await client.put(
        f"{API}/categories/vendor",
        json={"category_ids": [c.id for slug, c in categories.items() if slug != "retired"]},
        headers=headers,
    )
    assert too_many.status_code == 400
    assert too_many.json()["message"] == "Maximum 5 categories allowed"

    inactive = await client.put(
        f"{API}/categories/vendor", json={"category_ids": [categories["retired"].id]}, headers=headers
    )
    assert inactive.status_code == 400
    assert inactive.json()["message"] == "Category Retired is not active"

    unknown = await client.put(f"{API}/categories/vendor", json={"category_ids": ["ghost"]}, headers=headers)
    assert unknown.status_code == 404
    assert unknown.json()["message"] == "Category ghost not found"


async def test_client_cannot_use_vendor_routes(client, create_user, headers_for):
    customer = await create_user(role=UserRole.CLIENT)
    response = await client.get(f"{API}/categories/vendor/mine", headers=headers_for(customer))
    assert response.status_code == 403
    assert response.json()["code"] == "VENDOR_REQUIRED"
