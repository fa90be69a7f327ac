import os
import uuid
from datetime import datetime, timedelta, timezone

os.environ.setdefault("SUPABASE_JWT_SECRET", "test-secret")
os.environ["DB_TYPE"] = "sqlite"
os.environ.setdefault("SQLITE_URL", "sqlite+aiosqlite://")

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from khata.core.config import JWT_ALGORITHM, JWT_AUDIENCE, JWT_SECRET
from khata.core.db import Base, enable_sqlite_foreign_keys, get_db
from main import app


@pytest.fixture
def anyio_backend():
    return "asyncio"


def make_token(user_id=None, role="user", email="owner@example.com", **overrides):
    claims = {
        "sub": str(user_id or uuid.uuid4()),
        "aud": JWT_AUDIENCE,
        "email": email,
        "app_metadata": {"role": role},
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    claims.update(overrides)
    return jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALGORITHM)


@pytest.fixture
async def engine(tmp_path):
    # One file per test; each session gets its own connection
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'khata_test.db'}", poolclass=NullPool)
    event.listen(test_engine.sync_engine, "connect", enable_sqlite_foreign_keys)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def auth_headers(user_id):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def seed(client, auth_headers):
    """Helpers that create rows through the API and return their JSON."""

    class Seeder:
        async def customer(self, name="Ramesh", phone="+91 98765 43210"):
            resp = await client.post("/customers/", json={"name": name, "phone": phone}, headers=auth_headers)
            assert resp.status_code == 201, resp.text
            return resp.json()["data"]

        async def product(self, name="Tile", price=100, unit="pcs"):
            resp = await client.post(
                "/products/", json={"name": name, "price": price, "unit": unit}, headers=auth_headers
            )
            assert resp.status_code == 201, resp.text
            return resp.json()["data"]

        async def order(self, customer_id, lines, advance=0, job_date="2026-10-01", **extra):
            payload = {
                "customer_id": customer_id,
                "products": [{"productId": pid, "qty": qty} for pid, qty in lines],
                "job_date": job_date,
                "advance_amount": advance,
                **extra,
            }
            resp = await client.post("/orders/", json=payload, headers=auth_headers)
            assert resp.status_code == 201, resp.text
            return resp.json()["data"]

        async def deliver(self, order_id):
            resp = await client.post(f"/orders/{order_id}/deliver", headers=auth_headers)
            assert resp.status_code == 200, resp.text
            return resp.json()["data"]

    return Seeder()
