from indovendor.core.config import settings
from indovendor.crud import category_crud, user_crud, vendor_crud
from indovendor.db.models.vendor_model import VerificationStatus
from indovendor.db.seed import CATEGORIES, seed_database

API = settings.API_STR


async def test_seed_creates_demo_data(session, client):
    assert await seed_database(session) is True

    categories = await category_crud.get_categories(session)
    assert {c.slug for c in categories} == {slug for _, slug, _, _ in CATEGORIES}

    vendor_user = await user_crud.get_user_by_email(session, "vendor@indovendor.com")
    assert vendor_user.vendor.business_name == "Elegant Weddings Jakarta"
    assert vendor_user.vendor.verification_status == VerificationStatus.VERIFIED

    links = await vendor_crud.get_vendor_categories(session, vendor_user.vendor.id)
    assert {link.category.slug for link in links} == {"wedding-organizer", "decoration"}

    login = await client.post(f"{API}/auth/login", json={"email": "admin@indovendor.com", "password": "admin123"})
    assert login.status_code == 200
    assert login.json()["data"]["user"]["role"] == "SUPERADMIN"

    products = await client.get(f"{API}/products/")
    assert products.json()["data"]["total"] == 2


async def test_seed_is_idempotent(session):
    assert await seed_database(session) is True
    assert await seed_database(session) is False
    assert len(await category_crud.get_categories(session)) == len(CATEGORIES)
