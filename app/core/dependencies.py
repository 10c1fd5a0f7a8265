from fastapi import Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_db
from app.core.security import decode_token, get_bearer_token
from app.services.user_queries import get_user_by_id
from app.models.group import Group
from app.models.group_member import GroupMember

async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)):
    token = get_bearer_token(request)
    payload = decode_token(token)
    user_id = payload.get("sub")

    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid authentication credentials")

    try:
        user = await get_user_by_id(db, int(user_id))
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid authentication credentials")

    if user is None:
        raise HTTPException(status_code=401, detail="User not found")

    return user

async def get_group_or_404(db: AsyncSession, group_id: int, for_update: bool = False):
    q_group = select(Group).where(Group.id == group_id)
    if for_update:
        q_group = q_group.with_for_update()
    res_group = await db.execute(q_group)
    group = res_group.scalar_one_or_none()

    if not group:
        raise HTTPException(404, "Group does not exist")

    return group

async def check_group_membership(db: AsyncSession, group_id: int, user_id: int):
    await get_group_or_404(db, group_id)

    q_member = select(GroupMember).where(
        GroupMember.group_id == group_id,
        GroupMember.user_id == user_id
    )

    res_member = await db.execute(q_member)
    member = res_member.scalar_one_or_none()

    if not member:
        raise HTTPException(403, "You are not a member of this group")

    return member

async def check_group_admin(db: AsyncSession, group_id: int, user_id: int, for_update: bool = False):
    group = await get_group_or_404(db, group_id, for_update=for_update)

    if group.created_by != user_id:
        raise HTTPException(403, "Only group admin can create settlements")

    return group
