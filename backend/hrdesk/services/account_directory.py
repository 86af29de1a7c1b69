"""User accounts stored in the ``users`` collection of the data file.

Store access and bcrypt both block, so every public coroutine runs its
work in a worker thread.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import partial
from typing import Any

from anyio import to_thread

from hrdesk.core.exceptions import DuplicateUserError, InvalidCredentialsError, NotFoundError
from hrdesk.core.security import get_password_hash, verify_password
from hrdesk.store.document_store import DocumentStore, document_store

logger = logging.getLogger(__name__)

ADMIN_ROLE = "Admin"
EMPLOYEE_ROLE = "Employee"


def _public(user: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in user.items() if k != "password"}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def login_id_prefix(company_name: str, name: str, year: int) -> str:
    company_initials = "".join(word[:2] for word in company_name.split(" ")).upper()[:4]

    name_parts = name.strip().split(" ")
    first_name = name_parts[0]
    last_name = name_parts[-1]
    name_initials = (first_name[:2] + last_name[:2]).upper()

    return f"{company_initials}{name_initials}{year}"


def generate_login_id(
    company_name: str,
    name: str,
    existing_ids: set[str],
    year: int | None = None,
) -> str:
    """Build ``[company initials][name initials][year][serial]``, e.g. ``OIJODO20220001``.

    The serial continues after existing IDs with the same prefix.
    """
    if year is None:
        year = datetime.now(timezone.utc).year
    prefix = login_id_prefix(company_name, name, year)

    serial = sum(1 for login_id in existing_ids if login_id.startswith(prefix)) + 1
    candidate = f"{prefix}{serial:04d}"
    while candidate in existing_ids:
        serial += 1
        candidate = f"{prefix}{serial:04d}"
    return candidate


def _matches(user: dict[str, Any], key: str, value: Any) -> bool:
    return value is not None and user.get(key) == value


def _default_role(users: list[dict[str, Any]], company_name: str | None) -> str:
    # First account registered for a company administers it.
    if company_name and any(u.get("companyName") == company_name for u in users):
        return EMPLOYEE_ROLE
    return ADMIN_ROLE


class AccountDirectory:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def list_users(self) -> list[dict[str, Any]]:
        return await to_thread.run_sync(self._list_users)

    async def find_user(self, email: str | None = None, login_id: str | None = None) -> dict[str, Any]:
        if email is None and login_id is None:
            raise ValueError("find_user needs an email or a loginId")
        return await to_thread.run_sync(partial(self._find_user, email, login_id))

    async def signup(self, data: dict[str, Any]) -> dict[str, Any]:
        return await to_thread.run_sync(self._signup, data)

    async def login(self, identifier: str, password: str) -> dict[str, Any]:
        return await to_thread.run_sync(self._login, identifier, password)

    async def update_user(self, login_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        return await to_thread.run_sync(self._update_user, login_id, fields)

    async def delete_user(self, login_id: str) -> None:
        await to_thread.run_sync(self._delete_user, login_id)

    def _list_users(self) -> list[dict[str, Any]]:
        document = self.store.read()
        return [_public(user) for user in document["users"]]

    def _find_user(self, email: str | None, login_id: str | None) -> dict[str, Any]:
        document = self.store.read()
        for user in document["users"]:
            if _matches(user, "email", email) or _matches(user, "loginId", login_id):
                return _public(user)

        raise NotFoundError("User not found")

    def _signup(self, data: dict[str, Any]) -> dict[str, Any]:
        record = dict(data)
        password = record.get("password")
        if not password:
            raise ValueError("A password is required")

        with self.store.transaction() as txn:
            users = txn.collection("users")

            if not record.get("loginId"):
                company_name = record.get("companyName") or ""
                name = record.get("name") or ""
                if not company_name.strip() or not name.strip():
                    raise ValueError("companyName and name are required to generate a loginId")
                record["loginId"] = generate_login_id(
                    company_name,
                    name,
                    {u["loginId"] for u in users if u.get("loginId")},
                )

            for user in users:
                if _matches(user, "email", record.get("email")) or _matches(user, "loginId", record["loginId"]):
                    raise DuplicateUserError("User already exists")

            record["password"] = get_password_hash(password)
            if not record.get("role"):
                record["role"] = _default_role(users, record.get("companyName"))
            if not record.get("avatar") and record.get("name"):
                record["avatar"] = record["name"][0].upper()
            record.setdefault("createdAt", _now_iso())

            users.append(record)
            txn.mark_dirty()

        logger.info("User %s signed up as %s", record["loginId"], record["role"])
        return _public(record)

    def _login(self, identifier: str, password: str) -> dict[str, Any]:
        if identifier:
            document = self.store.read()
            for user in document["users"]:
                if identifier not in (user.get("email"), user.get("loginId")):
                    continue
                if verify_password(password, user.get("password") or ""):
                    logger.info("User %s logged in", user.get("loginId"))
                    return _public(user)

        raise InvalidCredentialsError("Invalid credentials")

    def _update_user(self, login_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        updates = {k: v for k, v in fields.items() if k != "loginId"}

        with self.store.transaction() as txn:
            users = txn.collection("users")
            index = next((i for i, u in enumerate(users) if u.get("loginId") == login_id), None)
            if index is None:
                raise NotFoundError("User not found")

            new_email = updates.get("email")
            if new_email is not None and any(
                i != index and u.get("email") == new_email for i, u in enumerate(users)
            ):
                raise DuplicateUserError("Email already registered")

            if "password" in updates:
                if not updates["password"]:
                    raise ValueError("Password cannot be empty")
                updates["password"] = get_password_hash(updates["password"])

            users[index] = {**users[index], **updates}
            txn.mark_dirty()
            updated = users[index]

        logger.info("User %s updated (%s)", login_id, ", ".join(sorted(updates)) or "no fields")
        return _public(updated)

    def _delete_user(self, login_id: str) -> None:
        with self.store.transaction() as txn:
            users = txn.collection("users")
            index = next((i for i, u in enumerate(users) if u.get("loginId") == login_id), None)
            if index is None:
                raise NotFoundError("User not found")

            del users[index]
            txn.mark_dirty()

        logger.info("User %s deleted", login_id)


account_directory = AccountDirectory(document_store)
