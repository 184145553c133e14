"""
User endpoints. Creating a user issues the API key its clients log with.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import conflict
from app.db.session import get_db
from app.schemas.user import UserCreate, UserCreateResponse
from app.services.users import user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Create a user.

    The API key is returned in this response.
    """
    try:
        user = await user_service.create_user(db, name=data.name, email=data.email)
    except IntegrityError:
        await db.rollback()
        raise conflict("Email already registered", details={"email": data.email})

    return user
