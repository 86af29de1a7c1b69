from __future__ import annotations

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, status

from hrdesk.core.config import settings
from hrdesk.core.dependencies import get_current_user
from hrdesk.core.exceptions import DuplicateEmployeeError, HRDeskError, NotFoundError
from hrdesk.models.auth import UserInfo
from hrdesk.models.employee import (
    AttendanceSummary,
    CheckInRequest,
    CheckOutRequest,
    Employee,
    EmployeeCreate,
    EmployeeUpdate,
)
from hrdesk.services.employee_directory import employee_directory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


def _clock_time() -> str:
    if settings.CLOCK_TIMEZONE:
        now = datetime.now(ZoneInfo(settings.CLOCK_TIMEZONE))
    else:
        now = datetime.now().astimezone()
    return now.strftime("%H:%M")


def _not_found(employee_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Employee '{employee_id}' not found",
    )


@router.get("", response_model=list[Employee])
async def list_employees(
    companyId: str | None = None,  # noqa: N803
    q: str | None = None,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        return await employee_directory.list_employees(company_id=companyId, query=q)
    except HRDeskError as err:
        logger.exception("Failed to list employees")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read employees",
        ) from err


@router.get("/summary", response_model=AttendanceSummary)
async def attendance_summary(
    companyId: str | None = None,  # noqa: N803
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        return await employee_directory.attendance_summary(company_id=companyId)
    except HRDeskError as err:
        logger.exception("Failed to build attendance summary")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read employees",
        ) from err


@router.get("/{employee_id}", response_model=Employee)
async def get_employee(
    employee_id: str,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        return await employee_directory.get_employee(employee_id)
    except NotFoundError as err:
        raise _not_found(employee_id) from err
    except HRDeskError as err:
        logger.exception("Failed to get employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read employees",
        ) from err


@router.post("", response_model=Employee, status_code=status.HTTP_201_CREATED)
async def create_employee(
    request: EmployeeCreate,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        return await employee_directory.create_employee(
            request.model_dump(by_alias=True, exclude_none=True, mode="json")
        )
    except DuplicateEmployeeError as err:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Employee already exists",
        ) from err
    except HRDeskError as err:
        logger.exception("Failed to create employee")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error",
        ) from err


@router.post("/{employee_id}/check-in", response_model=Employee)
async def check_in(
    employee_id: str,
    request: CheckInRequest | None = None,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    check_in_time = (request.check_in_time if request else None) or _clock_time()
    try:
        return await employee_directory.check_in(employee_id, check_in_time)
    except NotFoundError as err:
        raise _not_found(employee_id) from err
    except HRDeskError as err:
        logger.exception("Check-in failed for %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error",
        ) from err


@router.post("/{employee_id}/check-out", response_model=Employee)
async def check_out(
    employee_id: str,
    request: CheckOutRequest | None = None,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    check_out_time = (request.check_out_time if request else None) or _clock_time()
    try:
        return await employee_directory.check_out(employee_id, check_out_time)
    except NotFoundError as err:
        raise _not_found(employee_id) from err
    except HRDeskError as err:
        logger.exception("Check-out failed for %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error",
        ) from err


@router.put("/{employee_id}", response_model=Employee)
async def update_employee(
    employee_id: str,
    request: EmployeeUpdate,
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        return await employee_directory.update_employee(
            employee_id,
            request.model_dump(by_alias=True, exclude_unset=True, mode="json"),
        )
    except NotFoundError as err:
        raise _not_found(employee_id) from err
    except HRDeskError as err:
        logger.exception("Failed to update employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update employee",
        ) from err
