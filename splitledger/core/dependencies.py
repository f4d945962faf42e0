from contextlib import asynccontextmanager
from fastapi import Depends, HTTPException, Request
from splitledger.core.config import settings
from splitledger.core.entities import Group, User
from splitledger.core.jwt_config import decode_token, get_token_from_cookie
from splitledger.db.session import async_session
from splitledger.repositories.base import Stores
from splitledger.repositories.memory import memory_stores
from splitledger.repositories.sql import sql_stores

_memory = memory_stores()

@asynccontextmanager
async def open_stores():
    if settings.STORE_BACKEND == "memory":
        yield _memory
        return

    async with async_session() as session:
        yield sql_stores(session)

async def get_stores():
    async with open_stores() as stores:
        yield stores

async def get_current_user(request: Request, stores: Stores = Depends(get_stores)) -> User:
    token = get_token_from_cookie(request=request)
    payload = decode_token(token)
    user_id = payload.get("sub")

    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid authentication credentials")

    user = await stores.users.get(str(user_id))

    if user is None:
        raise HTTPException(status_code=401, detail="User not found")

    return user

async def check_group_membership(stores: Stores, group_id: str, user_id: str) -> Group:
    group = await stores.groups.get(group_id)

    if not group:
        raise HTTPException(404, "Group not found")

    if not group.has_member(user_id):
        raise HTTPException(403, "Not a member of this group")

    return group
