# roomchat/api/admin.py
from fastapi import APIRouter, Depends

from roomchat.api.dependencies import (
    get_current_user,
    get_optional_user,
    get_user_interactor,
)
from roomchat.infrastructure import schemas
from roomchat.interactors.user_interactor import UserInteractor

router = APIRouter()


@router.post("/users/role", response_model=schemas.User)
async def set_user_role(
    role_update: schemas.RoleUpdate,
    user_interactor: UserInteractor = Depends(get_user_interactor),
    current_user: schemas.User = Depends(get_current_user),
):
    return await user_interactor.set_user_role(
        current_user, role_update.email, role_update.role
    )


@router.post("/grant-admin", response_model=schemas.User)
async def grant_admin_access(
    grant: schemas.AdminGrant,
    user_interactor: UserInteractor = Depends(get_user_interactor),
    current_user: schemas.User | None = Depends(get_optional_user),
):
    return await user_interactor.grant_admin_access(
        current_user, grant.email, grant.setup_key
    )
