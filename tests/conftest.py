"""Pytest configuration helpers for the HaloLight test suite."""

import os

# Select the testing settings and keep Celery off the network before any
# application module reads its configuration.
os.environ["FASTAPI_ENV"] = "testing"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy import select  # noqa: E402

from halolight.database.engine import Base, build_engine, build_session_factory  # noqa: E402
from halolight.database.models import Permission, Role, RolePermission, UserRole  # noqa: E402
from halolight.dependencies import get_db  # noqa: E402
from halolight.main import create_app  # noqa: E402

TEST_PASSWORD = "password123"


@pytest_asyncio.fixture()
async def engine():
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture()
async def file_engine(tmp_path):
    """Engine on a database file, where each session gets its own connection."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'halolight.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def app(session_factory):
    application = create_app()

    async def override_get_db():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest_asyncio.fixture()
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client


@pytest_asyncio.fixture()
async def file_client(file_engine):
    """Client whose requests run on separate connections to a database file."""
    application = create_app()
    factory = build_session_factory(file_engine)

    async def override_get_db():
        async with factory() as session:
            yield session

    application.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=application)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client


@pytest.fixture()
def bearer():
    def _headers(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def register_user(client):
    """Register through the API and return the ``data`` payload."""

    async def _register(email: str = "alice@example.com", username: str = "alice", password: str = TEST_PASSWORD, **extra):
        response = await client.post(
            "/api/auth/register",
            json={"email": email, "username": username, "password": password, **extra},
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _register


@pytest.fixture()
def grant_role(session_factory):
    """Assign a role (created on demand, with optional ``resource:action`` grants) to a user."""

    async def _grant(user_id: str, role_name: str = "admin", permissions=()):
        async with session_factory() as session:
            role = (await session.execute(select(Role).where(Role.name == role_name))).scalar_one_or_none()
            if role is None:
                role = Role(name=role_name, label=role_name.title())
                session.add(role)
                await session.flush()

            for code in permissions:
                resource, action = code.split(":")
                permission = (
                    await session.execute(
                        select(Permission).where(Permission.resource == resource, Permission.action == action)
                    )
                ).scalar_one_or_none()
                if permission is None:
                    permission = Permission(resource=resource, action=action)
                    session.add(permission)
                    await session.flush()
                session.add(RolePermission(role_id=role.id, permission_id=permission.id))

            session.add(UserRole(user_id=user_id, role_id=role.id))
            await session.commit()
            return role.id

    return _grant


@pytest_asyncio.fixture()
async def admin(register_user, grant_role, bearer):
    """A registered user holding the admin role."""
    data = await register_user(email="admin@example.com", username="admin")
    await grant_role(data["user"]["id"], "admin")
    return {"id": data["user"]["id"], "token": data["token"], "headers": bearer(data["token"])}
