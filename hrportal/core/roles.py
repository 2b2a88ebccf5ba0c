from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from uuid import UUID


class RoleName(str, enum.Enum):
    ADMINISTRATOR = "Administrator"
    HR_MANAGER = "HR Manager"
    PROJECT_MANAGER = "Project Manager"
    EMPLOYEE = "Employee"


# Access groups required by endpoints.
STAFF_MANAGEMENT = frozenset({RoleName.ADMINISTRATOR, RoleName.HR_MANAGER})
PROJECT_MANAGEMENT = frozenset({RoleName.ADMINISTRATOR, RoleName.HR_MANAGER})
MANAGERS = frozenset({RoleName.ADMINISTRATOR, RoleName.HR_MANAGER, RoleName.PROJECT_MANAGER})
ALL_AUTHENTICATED = frozenset(RoleName)


class RoleRegistry:
    """Stable mapping between persisted role ids and RoleName, built once at startup."""

    def __init__(self, ids_by_name: Mapping[RoleName, UUID]) -> None:
        self._ids_by_name = dict(ids_by_name)
        self._names_by_id = {role_id: name for name, role_id in self._ids_by_name.items()}

    @classmethod
    def from_rows(cls, rows: Iterable[tuple[UUID, str]]) -> RoleRegistry:
        known = {member.value: member for member in RoleName}
        return cls({known[name]: role_id for role_id, name in rows if name in known})

    def name_of(self, role_id: UUID) -> RoleName | None:
        return self._names_by_id.get(role_id)

    def id_of(self, name: RoleName) -> UUID:
        return self._ids_by_name[name]

    def __contains__(self, role_id: object) -> bool:
        return role_id in self._names_by_id
