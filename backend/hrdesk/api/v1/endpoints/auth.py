from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from hrdesk.core.auth import create_access_token
from hrdesk.core.config import settings
from hrdesk.core.dependencies import get_current_user
from hrdesk.core.exceptions import DuplicateUserError, HRDeskError, InvalidCredentialsError, NotFoundError
from hrdesk.models.auth import LoginRequest, SignupRequest, TokenResponse, UserInfo
from hrdesk.models.user import UserPublic
from hrdesk.services.account_directory import account_directory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
async def signup(request: SignupRequest):
    try:
        return await account_directory.signup(request.model_dump(by_alias=True, exclude_none=True))
    except DuplicateUserError as err:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already exists",
        ) from err
    except ValueError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(err),
        ) from err
    except HRDeskError as err:
        logger.exception("Signup failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error",
        ) from err


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    try:
        user = await account_directory.login(request.resolved_identifier(), request.password)
    except InvalidCredentialsError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from err
    except HRDeskError as err:
        logger.exception("Login failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error",
        ) from err

    token = create_access_token(
        user["loginId"],
        settings.JWT_SECRET_KEY,
        settings.JWT_ALGORITHM,
        settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        extra_claims={
            "name": user.get("name"),
            "email": user.get("email"),
            "company": user.get("companyName"),
            "roles": [user["role"]] if user.get("role") else [],
        },
    )
    return TokenResponse(access_token=token, user=UserPublic.model_validate(user))


@router.get("/me", response_model=UserPublic)
async def me(user: UserInfo = Depends(get_current_user)):  # noqa: B008
    try:
        return await account_directory.find_user(login_id=user.id)
    except NotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        ) from err
