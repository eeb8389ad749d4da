import os
import tempfile
from decimal import Decimal

# Settings are read at import time, so the environment must be ready first
_DB_DIR = tempfile.mkdtemp(prefix="lumera-tests-")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR}/test.db"
os.environ["REDIS_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ["MAX_PAGE_SIZE"] = "150"

import httpx
import pytest
import pytest_asyncio

from lumera.core.cache import cache
from lumera.core.database import drop_db, get_db_context, init_db
from lumera.core.security import SecurityUtils
from lumera.main import app
from lumera.models import Category, Product, User

PRODUCT_IDS = ["p1", "p2", "p3", "p4"]


@pytest_asyncio.fixture
async def database():
    await init_db()
    yield
    await drop_db()
    cache.clear_local()


@pytest_asyncio.fixture
async def catalog(database):
    async with get_db_context() as db:
        perfume = Category(id="cat-perfume", name="Perfume", slug="perfume")
        honey = Category(id="cat-honey", name="Honey", slug="honey")
        db.add_all([perfume, honey])
        db.add_all([
            Product(id="p1", name="Amber Oud", description="Warm resin and oud",
                    price=Decimal("89.00"), stock=5, category_id="cat-perfume"),
            Product(id="p2", name="Citrus Bloom", description="Bergamot and neroli",
                    price=Decimal("64.00"), stock=0, category_id="cat-perfume"),
            Product(id="p3", name="Wildflower Honey", description="Raw spring harvest",
                    price=Decimal("18.50"), stock=40, category_id="cat-honey"),
            Product(id="p4", name="Manuka Honey", description="UMF 15+ amber honey",
                    price=Decimal("42.00"), stock=12, category_id="cat-honey"),
        ])
    return PRODUCT_IDS


@pytest_asyncio.fixture
async def user(database):
    async with get_db_context() as db:
        customer = User(phone="+15550100", email="ines@example.com", name="Ines")
        db.add(customer)
    return customer


@pytest.fixture
def token(user):
    return SecurityUtils.create_access_token({"sub": user.id})


@pytest.fixture
def transport():
    return httpx.ASGITransport(app=app)


@pytest_asyncio.fixture
async def api_client(transport):
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
