from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from hrportal.core.config import DEFAULT_ADMIN_PASSWORD, Settings
from hrportal.core.roles import RoleName, RoleRegistry
from hrportal.core.security import hash_password
from hrportal.models.hrms import LeaveType, Role, User

logger = logging.getLogger(__name__)

DEFAULT_LEAVE_TYPES: tuple[tuple[str, int], ...] = (
    ("Annual Leave", 20),
    ("Sick Leave", 10),
    ("Paternity Leave", 5),
    ("Maternity Leave", 90),
    ("Bereavement Leave", 3),
)


def _seed_roles(db: Session) -> RoleRegistry:
    existing = {r.name: r for r in db.scalars(select(Role))}
    for member in RoleName:
        if member.value not in existing:
            role = Role(name=member.value)
            db.add(role)
            existing[member.value] = role
            logger.info("Seeded role %s", member.value)
    db.flush()
    return RoleRegistry.from_rows((r.id, r.name) for r in existing.values())


def _seed_leave_types(db: Session) -> None:
    existing = {t.name: t for t in db.scalars(select(LeaveType))}
    for name, default_days in DEFAULT_LEAVE_TYPES:
        leave_type = existing.get(name)
        if leave_type is None:
            db.add(LeaveType(name=name, default_days=default_days))
            logger.info("Seeded leave type %s (%d days)", name, default_days)
        elif leave_type.default_days != default_days:
            leave_type.default_days = default_days


def _seed_admin(db: Session, settings: Settings, registry: RoleRegistry) -> None:
    email = settings.admin_email.lower()
    if db.scalar(select(User.id).where(User.email == email)) is not None:
        # Never reset the password of an existing account; it is rotated out-of-band.
        return

    db.add(
        User(
            full_name="HR Administrator",
            email=email,
            password_hash=hash_password(settings.admin_initial_password),
            role_id=registry.id_of(RoleName.ADMINISTRATOR),
            job_title="Administrator",
            is_active=True,
        )
    )
    logger.info("Seeded administrative user %s", email)
    if settings.admin_initial_password == DEFAULT_ADMIN_PASSWORD:
        logger.warning("Administrative user %s uses the default initial password; rotate it now.", email)


# PUBLIC_INTERFACE
def seed_reference_data(db: Session, settings: Settings) -> RoleRegistry:
    """Upsert roles, leave types and the initial administrator.

    Returns the role registry used by the authorization gate.
    """
    registry = _seed_roles(db)
    _seed_leave_types(db)
    _seed_admin(db, settings, registry)
    db.commit()
    return registry
