import logging
from dataclasses import replace

from fastapi import HTTPException

from splitledger.core.config import settings
from splitledger.core.entities import User
from splitledger.core.security import hash_password, verify_password
from splitledger.core.utils import normalize_phone
from splitledger.repositories.base import Stores
from splitledger.schemas.user import UserCreate

logger = logging.getLogger(__name__)

def clean_phone(phone: str) -> str:
    normalized = normalize_phone(phone, settings.PHONE_COUNTRY_CODE)
    if not normalized:
        raise HTTPException(400, "Invalid phone number format")
    return normalized

async def find_or_create_user(stores: Stores, phone: str) -> User:
    existing = await stores.users.get_by_phone(phone)
    if existing:
        return existing

    # Placeholder until the owner of the number registers
    user = await stores.users.put(User(name="", phone=phone))
    logger.info("Created placeholder user %s", user.id)
    return user

async def create_user(stores: Stores, data: UserCreate) -> User:
    phone = clean_phone(data.phone)
    existing = await stores.users.get_by_phone(phone)

    if existing and existing.password_hash:
        raise HTTPException(409, "User already exists")

    if existing:
        user = replace(existing, name=data.name or existing.name, password_hash=hash_password(data.password))
    else:
        user = User(name=data.name, phone=phone, password_hash=hash_password(data.password))

    await stores.users.put(user)
    logger.info("Registered user %s", user.id)
    return user

async def authenticate_user(stores: Stores, phone: str, password: str) -> User | None:
    normalized = normalize_phone(phone, settings.PHONE_COUNTRY_CODE)
    if not normalized:
        return None

    user = await stores.users.get_by_phone(normalized)
    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user

async def edit_user(stores: Stores, data, user_id: str) -> User:
    user = await stores.users.get(user_id)

    if not user:
        raise HTTPException(404, "User does not exist")

    if data.name:
        user = replace(user, name=data.name)

    return await stores.users.put(user)
