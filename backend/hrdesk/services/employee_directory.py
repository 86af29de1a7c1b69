"""Employee records and attendance in the ``employees`` collection."""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from functools import partial
from typing import Any

from anyio import to_thread

from hrdesk.core.exceptions import DuplicateEmployeeError, NotFoundError
from hrdesk.models.employee import EmployeeStatus
from hrdesk.store.document_store import DocumentStore, Transaction, document_store

logger = logging.getLogger(__name__)

_SEARCH_FIELDS: tuple[str, ...] = ("name", "department", "position")


def _find(employees: list[dict[str, Any]], employee_id: str) -> dict[str, Any]:
    for employee in employees:
        if employee.get("id") == employee_id:
            return employee
    raise NotFoundError(f"Employee '{employee_id}' not found")


def _matches_query(employee: dict[str, Any], query: str) -> bool:
    needle = query.lower()
    for field in _SEARCH_FIELDS:
        value = employee.get(field)
        if isinstance(value, str) and needle in value.lower():
            return True
    return False


class EmployeeDirectory:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def list_employees(
        self,
        company_id: str | None = None,
        query: str | None = None,
    ) -> list[dict[str, Any]]:
        return await to_thread.run_sync(partial(self._list_employees, company_id, query))

    async def get_employee(self, employee_id: str) -> dict[str, Any]:
        return await to_thread.run_sync(self._get_employee, employee_id)

    async def create_employee(self, data: dict[str, Any]) -> dict[str, Any]:
        return await to_thread.run_sync(self._create_employee, data)

    async def check_in(self, employee_id: str, check_in_time: str) -> dict[str, Any]:
        return await to_thread.run_sync(self._check_in, employee_id, check_in_time)

    async def check_out(self, employee_id: str, check_out_time: str) -> dict[str, Any]:
        return await to_thread.run_sync(self._check_out, employee_id, check_out_time)

    async def update_employee(self, employee_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        return await to_thread.run_sync(self._update_employee, employee_id, fields)

    async def attendance_summary(self, company_id: str | None = None) -> dict[str, int]:
        return await to_thread.run_sync(self._attendance_summary, company_id)

    def _list_employees(self, company_id: str | None, query: str | None) -> list[dict[str, Any]]:
        employees = self.store.read()["employees"]
        if company_id:
            employees = [e for e in employees if e.get("companyId") == company_id]
        if query:
            employees = [e for e in employees if _matches_query(e, query)]
        return employees

    def _get_employee(self, employee_id: str) -> dict[str, Any]:
        return _find(self.store.read()["employees"], employee_id)

    def _create_employee(self, data: dict[str, Any]) -> dict[str, Any]:
        record = dict(data)
        if not record.get("id"):
            record["id"] = uuid.uuid4().hex
        record.setdefault("status", EmployeeStatus.UNKNOWN.value)

        with self.store.transaction() as txn:
            employees = txn.collection("employees")
            email = record.get("email")
            for employee in employees:
                # Email uniqueness spans every company, not just record["companyId"].
                if email is not None and employee.get("email") == email:
                    raise DuplicateEmployeeError("Employee already exists")
                if employee.get("id") == record["id"]:
                    raise DuplicateEmployeeError(f"Employee id '{record['id']}' already in use")

            employees.append(record)
            txn.mark_dirty()

        logger.info("Employee %s created for company %s", record["id"], record.get("companyId"))
        return record

    def _check_in(self, employee_id: str, check_in_time: str) -> dict[str, Any]:
        with self.store.transaction() as txn:
            employee = _find(txn.collection("employees"), employee_id)
            employee["checkInTime"] = check_in_time
            # Overrides any previous status, including "on-leave".
            employee["status"] = EmployeeStatus.PRESENT.value
            txn.mark_dirty()

        logger.info("Employee %s checked in at %s", employee_id, check_in_time)
        return employee

    def _check_out(self, employee_id: str, check_out_time: str) -> dict[str, Any]:
        with self.store.transaction() as txn:
            employee = _find(txn.collection("employees"), employee_id)
            employee["checkOutTime"] = check_out_time
            txn.mark_dirty()

        logger.info("Employee %s checked out at %s", employee_id, check_out_time)
        return employee

    def _update_employee(self, employee_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        updates = {k: v for k, v in fields.items() if k != "id"}

        with self.store.transaction() as txn:
            updated = self._merge(txn, employee_id, updates)

        logger.info("Employee %s updated (%s)", employee_id, ", ".join(sorted(updates)) or "no fields")
        return updated

    def _attendance_summary(self, company_id: str | None) -> dict[str, int]:
        employees = self._list_employees(company_id, None)
        known = {status.value for status in EmployeeStatus}
        counts = Counter(
            e.get("status") if e.get("status") in known else EmployeeStatus.UNKNOWN.value for e in employees
        )
        return {
            "total": len(employees),
            "present": counts[EmployeeStatus.PRESENT.value],
            "absent": counts[EmployeeStatus.ABSENT.value],
            "onLeave": counts[EmployeeStatus.ON_LEAVE.value],
            "unknown": counts[EmployeeStatus.UNKNOWN.value],
        }

    def _merge(self, txn: Transaction, employee_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        employees = txn.collection("employees")
        for index, employee in enumerate(employees):
            if employee.get("id") == employee_id:
                employees[index] = {**employee, **updates}
                txn.mark_dirty()
                return employees[index]
        raise NotFoundError(f"Employee '{employee_id}' not found")


employee_directory = EmployeeDirectory(document_store)
