# roomchat/api/auth.py
from fastapi import APIRouter, Depends, status

from roomchat.api.dependencies import (
    get_auth_interactor,
    get_bearer_token,
    get_token_interactor,
)
from roomchat.infrastructure import schemas
from roomchat.interactors.auth_interactor import AuthInteractor
from roomchat.interactors.token_interactor import TokenInteractor

router = APIRouter()


@router.post("/otp/request", status_code=status.HTTP_202_ACCEPTED)
async def request_code(
    otp_request: schemas.OtpRequest,
    auth_interactor: AuthInteractor = Depends(get_auth_interactor),
):
    await auth_interactor.request_code(otp_request.email)
    return {"message": "Verification code sent"}


@router.post("/otp/verify", response_model=schemas.TokenResponse)
async def verify_code(
    otp_verify: schemas.OtpVerify,
    auth_interactor: AuthInteractor = Depends(get_auth_interactor),
    token_interactor: TokenInteractor = Depends(get_token_interactor),
):
    user = await auth_interactor.verify_code(otp_verify.email, otp_verify.code)
    return await token_interactor.issue_tokens(user.id)


@router.post("/guest", response_model=schemas.TokenResponse)
async def sign_in_guest(
    guest: schemas.GuestSignIn,
    auth_interactor: AuthInteractor = Depends(get_auth_interactor),
    token_interactor: TokenInteractor = Depends(get_token_interactor),
):
    user = await auth_interactor.sign_in_guest(guest.display_name)
    return await token_interactor.issue_tokens(user.id)


@router.post("/refresh", response_model=schemas.TokenResponse)
async def refresh_token(
    refresh_token_request: schemas.RefreshTokenRequest,
    token_interactor: TokenInteractor = Depends(get_token_interactor),
):
    return await token_interactor.refresh(refresh_token_request.refresh_token)


@router.post("/logout", status_code=204)
async def logout(
    token: str = Depends(get_bearer_token),
    token_interactor: TokenInteractor = Depends(get_token_interactor),
):
    await token_interactor.revoke(token)
