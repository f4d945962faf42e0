import asyncio

import pytest
from fastapi.testclient import TestClient

from splitledger.core.dependencies import get_stores
from splitledger.core.entities import Group, User
from splitledger.core.jwt_config import create_access_token
from splitledger.main import app
from splitledger.repositories.memory import memory_stores


@pytest.fixture
def stores():
    return memory_stores()


@pytest.fixture
def client(stores):
    async def override():
        yield stores

    app.dependency_overrides[get_stores] = override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def users(stores):
    people = {
        name: User(name=name.title(), phone=f"+91987654321{i}")
        for i, name in enumerate(("alice", "bob", "carol", "dave"))
    }
    for user in people.values():
        asyncio.run(stores.users.put(user))
    return people


@pytest.fixture
def auth(users):
    def headers(name):
        token = create_access_token({"sub": users[name].id})
        return {"Authorization": f"Bearer {token}"}
    return headers


@pytest.fixture
def trip(stores, users):
    group = Group(
        name="Goa Trip",
        created_by=users["alice"].id,
        member_ids=(users["alice"].id, users["bob"].id, users["carol"].id),
    )
    asyncio.run(stores.groups.put(group))
    return group
