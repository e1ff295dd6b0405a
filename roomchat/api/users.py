# roomchat/api/users.py
from fastapi import APIRouter, Depends

from roomchat.api.dependencies import (
    get_current_user,
    get_optional_user,
    get_user_interactor,
)
from roomchat.infrastructure import schemas
from roomchat.interactors.user_interactor import UserInteractor

router = APIRouter()


@router.get("/me", response_model=schemas.User | None)
async def read_users_me(
    current_user: schemas.User | None = Depends(get_optional_user),
):
    return current_user


@router.put("/me", response_model=schemas.User)
async def update_profile(
    profile: schemas.ProfileUpdate,
    user_interactor: UserInteractor = Depends(get_user_interactor),
    current_user: schemas.User = Depends(get_current_user),
):
    return await user_interactor.update_profile(current_user.id, profile)


@router.post("/me/premium", response_model=schemas.User)
async def upgrade_to_premium(
    user_interactor: UserInteractor = Depends(get_user_interactor),
    current_user: schemas.User = Depends(get_current_user),
):
    return await user_interactor.upgrade_to_premium(current_user.id)
