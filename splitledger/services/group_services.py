import logging
from dataclasses import replace

from fastapi import HTTPException

from splitledger.core.entities import Group, User
from splitledger.repositories.base import Stores
from splitledger.services.user_service import clean_phone, find_or_create_user

logger = logging.getLogger(__name__)

async def create_group(stores: Stores, name: str, creator_id: str) -> Group:
    group = Group(name=name, created_by=creator_id, member_ids=(creator_id,))
    await stores.groups.put(group)
    logger.info("Group %s created by %s", group.id, creator_id)
    return group

async def list_group_for_user(stores: Stores, user_id: str):
    return await stores.groups.list(member_id=user_id)

async def list_group_members(stores: Stores, group: Group) -> list[User]:
    members = []
    for uid in group.member_ids:
        user = await stores.users.get(uid)
        if user:
            members.append(user)
    return members

async def user_names(stores: Stores, user_ids) -> dict[str, str]:
    names = {}
    for uid in user_ids:
        user = await stores.users.get(uid)
        names[uid] = user.display_name if user else None
    return names

async def get_group_detail(stores: Stores, group: Group, user_id: str):
    members = await list_group_members(stores, group)

    display_name = group.name
    if group.type == "direct":
        other = next((m for m in members if m.id != user_id), None)
        if other:
            display_name = other.display_name

    return {
        "id": group.id,
        "name": group.name,
        "display_name": display_name,
        "type": group.type,
        "created_at": group.created_at,
        "members": [{"id": m.id, "name": m.name, "phone": m.phone} for m in members],
    }

async def join_group(stores: Stores, group_id: str, user_id: str) -> Group:
    group = await stores.groups.get(group_id)

    if not group:
        raise HTTPException(404, "Group not found")

    if group.type == "direct":
        raise HTTPException(400, "Cannot join this type of group")

    if group.has_member(user_id):
        return group

    group = replace(group, member_ids=group.member_ids + (user_id,))
    await stores.groups.put(group)
    logger.info("User %s joined group %s", user_id, group_id)
    return group

async def get_or_create_direct(stores: Stores, current_user: User, phone: str):
    normalized = clean_phone(phone)

    if normalized == current_user.phone:
        raise HTTPException(400, "Cannot create a split with yourself")

    other = await find_or_create_user(stores, normalized)

    existing = await stores.groups.find_direct(current_user.id, other.id)
    if existing:
        return existing, other, False

    group = Group(
        name=f"{current_user.phone} & {other.phone}",
        type="direct",
        created_by=current_user.id,
        member_ids=(current_user.id, other.id),
    )
    await stores.groups.put(group)
    logger.info("Direct group %s created between %s and %s", group.id, current_user.id, other.id)
    return group, other, True
