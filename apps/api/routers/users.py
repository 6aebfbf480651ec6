"""
User JSON API. Projections never include credentials.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models.user import User
from repositories import UserRepository
from schemas import UserDto

router = APIRouter()
logger = logging.getLogger(__name__)


def serialize_user(user: User) -> UserDto:
    return UserDto(
        id=user.id,
        user_name=user.user_name,
        first_name=user.first_name,
        last_name=user.last_name,
        profile_image_url=user.profile_image_url,
        email=user.email,
        phone_number=user.phone_number,
        email_confirmed=user.email_confirmed,
    )


@router.get("/userlist", response_model=List[UserDto])
async def user_list(db: AsyncSession = Depends(get_db)):
    users = await UserRepository(db).list()
    if users is None:
        logger.error("User list not found while executing UserRepository.list()")
        raise HTTPException(status_code=404, detail="User list not found")
    return [serialize_user(user) for user in users]


@router.get("/user/{user_id}", response_model=UserDto)
async def get_user_by_id(user_id: str, db: AsyncSession = Depends(get_db)):
    user = await UserRepository(db).get_by_id(user_id)
    if user is None:
        logger.warning("User not found for user_id=%s", user_id)
        raise HTTPException(status_code=404, detail="User not found")
    return serialize_user(user)
