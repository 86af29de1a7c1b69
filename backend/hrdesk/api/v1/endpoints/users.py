from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from hrdesk.core.dependencies import get_current_user, require_role
from hrdesk.core.exceptions import DuplicateUserError, HRDeskError, NotFoundError
from hrdesk.models.auth import UserInfo
from hrdesk.models.user import UserPublic, UserUpdate
from hrdesk.services.account_directory import ADMIN_ROLE, account_directory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _not_found(login_id: str | None) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"User '{login_id}' not found" if login_id else "User not found",
    )


def _server_error(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail,
    )


async def _require_owner_or_company_admin(user: UserInfo, login_id: str) -> None:
    """Let a user manage their own account, and an Admin manage accounts of their company."""
    if user.id == login_id:
        return
    if ADMIN_ROLE in user.roles and user.company:
        target = await account_directory.find_user(login_id=login_id)
        if target.get("companyName") == user.company:
            return

    logger.warning("User %s may not change account %s", user.id, login_id)
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Only the account owner or an Admin of its company may change it",
    )


@router.get("", response_model=list[UserPublic] | UserPublic)
async def list_or_find_users(
    email: str | None = None,
    loginId: str | None = None,  # noqa: N803
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    """List all users, or look one up when ``email`` or ``loginId`` is given."""
    try:
        if email or loginId:
            return await account_directory.find_user(email=email or None, login_id=loginId or None)
        return await account_directory.list_users()
    except NotFoundError as err:
        raise _not_found(None) from err
    except HRDeskError as err:
        logger.exception("Failed to read users")
        raise _server_error("Failed to read users") from err


@router.get("/{login_id}", response_model=UserPublic)
async def get_user(
    login_id: str,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        return await account_directory.find_user(login_id=login_id)
    except NotFoundError as err:
        raise _not_found(login_id) from err
    except HRDeskError as err:
        logger.exception("Failed to read user %s", login_id)
        raise _server_error("Failed to read users") from err


@router.put("/{login_id}", response_model=UserPublic)
async def update_user(
    login_id: str,
    request: UserUpdate,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        await _require_owner_or_company_admin(user, login_id)
        return await account_directory.update_user(login_id, request.model_dump(by_alias=True, exclude_unset=True))
    except NotFoundError as err:
        raise _not_found(login_id) from err
    except DuplicateUserError as err:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        ) from err
    except ValueError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(err),
        ) from err
    except HRDeskError as err:
        logger.exception("Failed to update user %s", login_id)
        raise _server_error("Failed to update user") from err


@router.delete("/{login_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    login_id: str,
    user: UserInfo = Depends(require_role(ADMIN_ROLE)),  # noqa: B008
):
    try:
        await _require_owner_or_company_admin(user, login_id)
        await account_directory.delete_user(login_id)
    except NotFoundError as err:
        raise _not_found(login_id) from err
    except HRDeskError as err:
        logger.exception("Failed to delete user %s", login_id)
        raise _server_error("Failed to delete user") from err

    logger.info("User %s deleted by %s", login_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
