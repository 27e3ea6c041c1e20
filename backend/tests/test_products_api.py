import os
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from indovendor.core.config import settings
from indovendor.core.permissions import UserRole
from indovendor.crud import category_crud, product_crud
from indovendor.schemas.category_schema import CategoryCreate

API = settings.API_STR
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest_asyncio.fixture
async def catalog(session_maker):
    async with session_maker() as session:
        wedding = await category_crud.create_category(session, CategoryCreate(name="Wedding Organizer"), slug="wedding-organizer")
        catering = await category_crud.create_category(session, CategoryCreate(name="Catering"), slug="catering")
        retired = await category_crud.create_category(
            session, CategoryCreate(name="Retired", is_active=False), slug="retired"
        )
    return {"wedding": wedding, "catering": catering, "retired": retired}


@pytest_asyncio.fixture
async def vendor_user(create_user):
    return await create_user(role=UserRole.VENDOR, business_name="Elegant Weddings Jakarta")


def product_payload(category_id, **overrides):
    payload = {
        "category_id": category_id,
        "name": "Complete Wedding Package",
        "description": "Planning and coordination",
        "base_price": 50000000,
        "unit_type": "package",
        "min_order": 1,
        "max_order": 1,
        "discount_percentage": 10,
    }
    payload.update(overrides)
    return payload


async def _create_product(client, headers, category_id, **overrides):
    response = await client.post(f"{API}/products/", json=product_payload(category_id, **overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def _parse(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))

# ========================================
# CREACIÓN Y VALIDACIÓN
# ========================================

async def test_vendor_creates_product(client, headers_for, vendor_user, catalog):
    data = await _create_product(client, headers_for(vendor_user), catalog["wedding"].id)
    assert data["vendor_id"] == vendor_user.vendor.id
    assert data["category"]["slug"] == "wedding-organizer"
    assert data["vendor"]["business_name"] == "Elegant Weddings Jakarta"
    assert data["base_price"] == 50000000
    assert data["images"] == []
    assert data["is_active"] is True


async def test_create_product_collects_validation_errors(client, headers_for, vendor_user, catalog):
    response = await client.post(
        f"{API}/products/",
        json=product_payload(
            catalog["wedding"].id, name="ab", base_price=0, min_order=3, max_order=2, discount_percentage=120
        ),
        headers=headers_for(vendor_user),
    )
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert errors == [
        "Product name must be between 3 and 100 characters",
        "Base price must be greater than 0",
        "Maximum order must be greater than or equal to minimum order",
        "Discount percentage must be between 0 and 100",
    ]
    assert response.json()["message"] == "Validation failed: " + ", ".join(errors)


async def test_create_product_price_ceiling(client, headers_for, vendor_user, catalog):
    response = await client.post(
        f"{API}/products/",
        json=product_payload(catalog["wedding"].id, base_price=1_000_000_000),
        headers=headers_for(vendor_user),
    )
    assert response.status_code == 400


async def test_create_product_category_checks(client, headers_for, vendor_user, catalog):
    headers = headers_for(vendor_user)
    missing = await client.post(f"{API}/products/", json=product_payload("ghost"), headers=headers)
    assert missing.status_code == 404
    assert missing.json()["message"] == "Category not found"

    inactive = await client.post(f"{API}/products/", json=product_payload(catalog["retired"].id), headers=headers)
    assert inactive.status_code == 400
    assert inactive.json()["message"] == "Category is not active"


async def test_client_cannot_create_product(client, create_user, headers_for, catalog):
    customer = await create_user()
    response = await client.post(f"{API}/products/", json=product_payload(catalog["wedding"].id), headers=headers_for(customer))
    assert response.status_code == 403
    assert response.json()["code"] == "INSUFFICIENT_PERMISSIONS"
    assert response.json()["data"] == {"user_role": "CLIENT", "required_permission": "product:create"}

# ========================================
# CONSULTAS
# ========================================

async def test_list_filters_sort_and_pagination(client, headers_for, vendor_user, catalog):
    headers = headers_for(vendor_user)
    await _create_product(client, headers, catalog["wedding"].id, name="Gold Package", base_price=30000000)
    await _create_product(client, headers, catalog["wedding"].id, name="Silver Package", base_price=20000000)
    await _create_product(client, headers, catalog["catering"].id, name="Buffet Dinner", base_price=150000)

    response = await client.get(
        f"{API}/products/",
        params={"category_id": catalog["wedding"].id, "sort_by": "base_price", "sort_order": "asc"},
    )
    data = response.json()["data"]
    assert data["total"] == 2
    assert [p["name"] for p in data["products"]] == ["Silver Package", "Gold Package"]
    assert data["limit"] == 20
    assert data["offset"] == 0

    priced = await client.get(f"{API}/products/", params={"min_price": 100000, "max_price": 25000000})
    assert {p["name"] for p in priced.json()["data"]["products"]} == {"Silver Package", "Buffet Dinner"}

    searched = await client.get(f"{API}/products/", params={"search": "buffet"})
    assert searched.json()["data"]["total"] == 1

    paged = await client.get(f"{API}/products/", params={"limit": 1, "offset": 1, "sort_by": "name", "sort_order": "asc"})
    assert paged.json()["data"]["total"] == 3
    assert [p["name"] for p in paged.json()["data"]["products"]] == ["Gold Package"]


async def test_list_rejects_bad_filters(client):
    inverted = await client.get(f"{API}/products/", params={"min_price": 10, "max_price": 5})
    assert inverted.status_code == 400
    assert "Minimum price cannot be greater than maximum price" in inverted.json()["errors"]

    too_big = await client.get(f"{API}/products/", params={"limit": 101})
    assert too_big.status_code == 422

    bad_sort = await client.get(f"{API}/products/", params={"sort_by": "rating"})
    assert bad_sort.status_code == 422


async def test_search(client, headers_for, vendor_user, catalog):
    headers = headers_for(vendor_user)
    await _create_product(client, headers, catalog["wedding"].id, name="Garden Wedding", specifications="Includes string quartet")
    await _create_product(client, headers, catalog["wedding"].id, name="Hidden Wedding", is_active=False)

    short = await client.get(f"{API}/products/search", params={"q": "a"})
    assert short.status_code == 400
    assert short.json()["message"] == "Search query must be at least 2 characters long"

    response = await client.get(f"{API}/products/search", params={"q": "quartet"})
    data = response.json()["data"]
    assert data["query"] == "quartet"
    assert data["count"] == 1
    assert data["products"][0]["name"] == "Garden Wedding"

    # Los productos inactivos no aparecen en búsquedas públicas
    wedding = await client.get(f"{API}/products/search", params={"q": "wedding"})
    assert [p["name"] for p in wedding.json()["data"]["products"]] == ["Garden Wedding"]


async def test_advanced_search_pages(client, headers_for, vendor_user, catalog):
    headers = headers_for(vendor_user)
    for name in ["Alpha Package", "Bravo Package", "Charlie Package"]:
        await _create_product(client, headers, catalog["wedding"].id, name=name)

    first = await client.get(
        f"{API}/products/search/advanced", params={"page": 1, "page_size": 2, "sort_by": "name", "sort_order": "asc"}
    )
    data = first.json()["data"]
    assert [p["name"] for p in data["products"]] == ["Alpha Package", "Bravo Package"]
    assert data["has_next"] is True
    assert data["has_previous"] is False

    second = await client.get(
        f"{API}/products/search/advanced", params={"page": 2, "page_size": 2, "sort_by": "name", "sort_order": "asc"}
    )
    data = second.json()["data"]
    assert [p["name"] for p in data["products"]] == ["Charlie Package"]
    assert data["has_next"] is False
    assert data["has_previous"] is True


async def test_featured_requires_paid_period(client, headers_for, vendor_user, catalog, session_maker):
    headers = headers_for(vendor_user)
    paid = await _create_product(client, headers, catalog["wedding"].id, name="Paid Feature")
    pending = await _create_product(client, headers, catalog["wedding"].id, name="Pending Feature")
    now = datetime.now(timezone.utc)
    async with session_maker() as session:
        await product_crud.add_featured_period(session, paid["id"], now - timedelta(days=1), now + timedelta(days=1), "PAID")
        await product_crud.add_featured_period(session, pending["id"], now - timedelta(days=1), now + timedelta(days=1))

    response = await client.get(f"{API}/products/featured")
    assert [p["name"] for p in response.json()["data"]] == ["Paid Feature"]


async def test_request_featured_creates_pending_entry(client, headers_for, vendor_user, catalog):
    headers = headers_for(vendor_user)
    product = await _create_product(client, headers, catalog["wedding"].id)
    start = datetime.now(timezone.utc)
    response = await client.post(
        f"{API}/products/{product['id']}/featured",
        json={"start_date": start.isoformat(), "end_date": (start + timedelta(days=7)).isoformat()},
        headers=headers,
    )
    assert response.status_code == 201
    assert response.json()["data"]["payment_status"] == "PENDING"

    inverted = await client.post(
        f"{API}/products/{product['id']}/featured",
        json={"start_date": start.isoformat(), "end_date": (start - timedelta(days=1)).isoformat()},
        headers=headers,
    )
    assert inverted.status_code == 400


async def test_request_featured_normalizes_dates_to_utc(client, headers_for, vendor_user, catalog):
    headers = headers_for(vendor_user)
    product = await _create_product(client, headers, catalog["wedding"].id)
    response = await client.post(
        f"{API}/products/{product['id']}/featured",
        json={"start_date": "2030-01-01T07:00:00+07:00", "end_date": "2030-02-01T00:00:00"},
        headers=headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert _parse(data["start_date"]) == datetime(2030, 1, 1, tzinfo=timezone.utc)
    assert _parse(data["end_date"]) == datetime(2030, 2, 1, tzinfo=timezone.utc)


async def test_popular_category_and_similar(client, headers_for, vendor_user, catalog):
    headers = headers_for(vendor_user)
    first = await _create_product(client, headers, catalog["wedding"].id, name="First Package")
    await _create_product(client, headers, catalog["wedding"].id, name="Second Package")
    await _create_product(client, headers, catalog["catering"].id, name="Buffet Dinner")

    popular = await client.get(f"{API}/products/popular", params={"limit": 2})
    assert len(popular.json()["data"]) == 2

    by_category = await client.get(f"{API}/products/category/{catalog['wedding'].id}")
    assert {p["name"] for p in by_category.json()["data"]} == {"First Package", "Second Package"}

    unknown = await client.get(f"{API}/products/category/ghost")
    assert unknown.status_code == 404

    similar = await client.get(f"{API}/products/{first['id']}/similar")
    assert [p["name"] for p in similar.json()["data"]] == ["Second Package"]


async def test_get_product_not_found(client):
    response = await client.get(f"{API}/products/ghost")
    assert response.status_code == 404
    assert response.json()["message"] == "Product not found"


async def test_vendor_products_and_stats(client, headers_for, vendor_user, catalog):
    headers = headers_for(vendor_user)
    await _create_product(client, headers, catalog["wedding"].id, name="Active One")
    await _create_product(client, headers, catalog["wedding"].id, name="Draft One", is_active=False)

    mine = await client.get(f"{API}/products/vendor/mine", headers=headers)
    assert {p["name"] for p in mine.json()["data"]} == {"Active One", "Draft One"}

    stats = await client.get(f"{API}/products/vendor/stats", headers=headers)
    assert stats.json()["data"] == {"total_products": 2, "active_products": 1, "inactive_products": 1}

# ========================================
# MODIFICACIÓN Y PROPIEDAD
# ========================================

async def test_update_product_ownership(client, create_user, headers_for, vendor_user, catalog):
    product = await _create_product(client, headers_for(vendor_user), catalog["wedding"].id)
    rival = await create_user(role=UserRole.VENDOR)
    admin = await create_user(role=UserRole.SUPERADMIN)

    denied = await client.put(f"{API}/products/{product['id']}", json={"name": "Stolen"}, headers=headers_for(rival))
    assert denied.status_code == 403
    assert denied.json()["message"] == "You can only update your own products"

    own = await client.put(
        f"{API}/products/{product['id']}", json={"name": "Renamed Package", "max_order": 4}, headers=headers_for(vendor_user)
    )
    assert own.status_code == 200
    assert own.json()["data"]["name"] == "Renamed Package"
    assert own.json()["data"]["max_order"] == 4

    by_admin = await client.put(f"{API}/products/{product['id']}", json={"discount_percentage": 0}, headers=headers_for(admin))
    assert by_admin.status_code == 200
    assert by_admin.json()["data"]["discount_percentage"] == 0


async def test_update_validates_against_current_values(client, headers_for, vendor_user, catalog):
    product = await _create_product(client, headers_for(vendor_user), catalog["wedding"].id, min_order=2, max_order=5)
    response = await client.put(f"{API}/products/{product['id']}", json={"max_order": 1}, headers=headers_for(vendor_user))
    assert response.status_code == 400
    assert response.json()["errors"] == ["Maximum order must be greater than or equal to minimum order"]


async def test_update_rejects_null_category_and_status(client, headers_for, vendor_user, catalog):
    headers = headers_for(vendor_user)
    product = await _create_product(client, headers, catalog["wedding"].id)

    no_category = await client.put(f"{API}/products/{product['id']}", json={"category_id": None}, headers=headers)
    assert no_category.status_code == 400
    assert no_category.json()["errors"] == ["Category ID is required"]

    no_status = await client.put(f"{API}/products/{product['id']}", json={"is_active": None}, headers=headers)
    assert no_status.status_code == 400
    assert no_status.json()["errors"] == ["Active status cannot be null"]

    current = await client.get(f"{API}/products/{product['id']}")
    assert current.json()["data"]["is_active"] is True


async def test_status_toggle(client, headers_for, vendor_user, catalog):
    headers = headers_for(vendor_user)
    product = await _create_product(client, headers, catalog["wedding"].id)

    off = await client.put(f"{API}/products/{product['id']}/status", json={"is_active": False}, headers=headers)
    assert off.json()["message"] == "Product deactivated successfully"
    assert off.json()["data"]["is_active"] is False

    on = await client.put(f"{API}/products/{product['id']}/status", json={"is_active": True}, headers=headers)
    assert on.json()["message"] == "Product activated successfully"


async def test_duplicate_product(client, headers_for, vendor_user, catalog):
    headers = headers_for(vendor_user)
    product = await _create_product(client, headers, catalog["wedding"].id, name="Royal Package")

    copy = await client.post(f"{API}/products/{product['id']}/duplicate", headers=headers)
    assert copy.status_code == 201
    data = copy.json()["data"]
    assert data["name"] == "Royal Package (Copy)"
    assert data["is_active"] is False
    assert data["images"] == []
    assert data["id"] != product["id"]

    named = await client.post(f"{API}/products/{product['id']}/duplicate", json={"name": "Royal Package II"}, headers=headers)
    assert named.json()["data"]["name"] == "Royal Package II"


async def test_delete_product(client, create_user, headers_for, vendor_user, catalog):
    product = await _create_product(client, headers_for(vendor_user), catalog["wedding"].id)
    rival = await create_user(role=UserRole.VENDOR)

    denied = await client.delete(f"{API}/products/{product['id']}", headers=headers_for(rival))
    assert denied.status_code == 403
    assert denied.json()["message"] == "You can only delete your own products"

    deleted = await client.delete(f"{API}/products/{product['id']}", headers=headers_for(vendor_user))
    assert deleted.status_code == 200
    assert (await client.get(f"{API}/products/{product['id']}")).status_code == 404


async def test_bulk_operations(client, create_user, headers_for, vendor_user, catalog):
    headers = headers_for(vendor_user)
    ids = [
        (await _create_product(client, headers, catalog["wedding"].id, name=f"Package {n}"))["id"]
        for n in range(3)
    ]

    updated = await client.put(f"{API}/products/bulk/status", json={"product_ids": ids, "is_active": False}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["data"]["updated"] == 3

    empty = await client.put(f"{API}/products/bulk/status", json={"product_ids": [], "is_active": True}, headers=headers)
    assert empty.status_code == 400

    rival = await create_user(role=UserRole.VENDOR)
    foreign = await client.request("DELETE", f"{API}/products/bulk", json={"product_ids": ids}, headers=headers_for(rival))
    assert foreign.status_code == 403

    deleted = await client.request("DELETE", f"{API}/products/bulk", json={"product_ids": ids[:2]}, headers=headers)
    assert deleted.json()["data"]["deleted"] == 2

    stats = await client.get(f"{API}/products/vendor/stats", headers=headers)
    assert stats.json()["data"]["total_products"] == 1

# ========================================
# IMÁGENES
# ========================================

async def test_upload_reorder_and_delete_images(client, headers_for, vendor_user, catalog, upload_dir):
    headers = headers_for(vendor_user)
    product = await _create_product(client, headers, catalog["wedding"].id)

    uploaded = await client.post(
        f"{API}/products/{product['id']}/images",
        files=[("images", ("a.png", PNG, "image/png")), ("images", ("b.png", PNG, "image/png"))],
        headers=headers,
    )
    assert uploaded.status_code == 201
    images = uploaded.json()["data"]
    assert [img["sort_order"] for img in images] == [0, 1]
    for img in images:
        assert img["url"].startswith(f"/uploads/products/{product['id']}_")
        assert os.path.exists(upload_dir / "products" / img["url"].rsplit("/", 1)[1])

    single = await client.post(
        f"{API}/products/{product['id']}/images/single",
        files={"image": ("c.png", PNG, "image/png")},
        data={"alt": "Stage", "sort_order": "5"},
        headers=headers,
    )
    assert single.status_code == 201
    assert single.json()["data"]["alt"] == "Stage"
    assert single.json()["data"]["sort_order"] == 5

    first, second = images
    reordered = await client.put(
        f"{API}/products/{product['id']}/images/order",
        json={"images": [{"id": first["id"], "sort_order": 9}, {"id": second["id"], "sort_order": 0}]},
        headers=headers,
    )
    assert [img["id"] for img in reordered.json()["data"]] == [second["id"], single.json()["data"]["id"], first["id"]]

    listed = await client.get(f"{API}/products/{product['id']}/images")
    assert len(listed.json()["data"]) == 3

    removed = await client.delete(f"{API}/products/{product['id']}/images/{first['id']}", headers=headers)
    assert removed.status_code == 200
    assert not os.path.exists(upload_dir / "products" / first["url"].rsplit("/", 1)[1])

    missing = await client.delete(f"{API}/products/{product['id']}/images/{first['id']}", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["message"] == "Image not found"


@pytest.mark.parametrize(
    "filename,content,content_type,message",
    [
        ("doc.pdf", b"%PDF-1.4", "application/pdf", "Only JPEG, PNG, and WebP images are allowed"),
        ("big.png", b"\x00" * (5 * 1024 * 1024 + 1), "image/png", "Image file size must not exceed 5MB"),
    ],
)
async def test_image_upload_rules(client, headers_for, vendor_user, catalog, filename, content, content_type, message):
    headers = headers_for(vendor_user)
    product = await _create_product(client, headers, catalog["wedding"].id)
    response = await client.post(
        f"{API}/products/{product['id']}/images",
        files=[("images", (filename, content, content_type))],
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == message


async def test_image_upload_limit_and_ownership(client, create_user, headers_for, vendor_user, catalog):
    headers = headers_for(vendor_user)
    product = await _create_product(client, headers, catalog["wedding"].id)

    too_many = await client.post(
        f"{API}/products/{product['id']}/images",
        files=[("images", (f"{n}.png", PNG, "image/png")) for n in range(11)],
        headers=headers,
    )
    assert too_many.status_code == 400
    assert too_many.json()["message"] == "Maximum 10 images can be uploaded at once"

    rival = await create_user(role=UserRole.VENDOR)
    denied = await client.post(
        f"{API}/products/{product['id']}/images",
        files=[("images", ("a.png", PNG, "image/png"))],
        headers=headers_for(rival),
    )
    assert denied.status_code == 403
    assert denied.json()["message"] == "You can only upload images to your own products"


async def test_deleting_product_removes_image_files(client, headers_for, vendor_user, catalog, upload_dir):
    headers = headers_for(vendor_user)
    product = await _create_product(client, headers, catalog["wedding"].id)
    uploaded = await client.post(
        f"{API}/products/{product['id']}/images",
        files=[("images", ("a.png", PNG, "image/png"))],
        headers=headers,
    )
    filename = uploaded.json()["data"][0]["url"].rsplit("/", 1)[1]
    assert os.path.exists(upload_dir / "products" / filename)

    await client.delete(f"{API}/products/{product['id']}", headers=headers)
    assert not os.path.exists(upload_dir / "products" / filename)
