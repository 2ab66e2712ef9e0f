"""Seed demo accounts, a fully staffed roster and a week of attendance.

Safe to re-run: existing accounts are kept, staff are only created into an
empty directory, and attendance marks are upserts.
"""

from __future__ import annotations

import importlib
import logging
import random
import sys
from datetime import timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src" / "staffing_system"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from staffing_system.common.datetime_utils import now_local
from staffing_system.container import build_container
from staffing_system.core.enums import AttendanceStatus
from staffing_system.core.exceptions import ValidationError
from staffing_system.database.bootstrap import apply_schema

logger = logging.getLogger("seed_db")

DEMO_USERS = [
    {"name": "John Doe", "username": "john_doe", "email": "john@example.com", "password": "password123"},
    {"name": "Jane Smith", "username": "jane_smith", "email": "jane@example.com", "password": "demo1234"},
]

# One Doctor, two Nurses and one Technician per shift.
DEMO_STAFF = {
    "Morning": [
        ("Dr. Sarah Johnson", "Doctor"),
        ("Nurse Emily Davis", "Nurse"),
        ("Nurse Michael Brown", "Nurse"),
        ("Tech Robert Wilson", "Technician"),
    ],
    "Evening": [
        ("Dr. James Anderson", "Doctor"),
        ("Nurse Jessica Martinez", "Nurse"),
        ("Nurse David Taylor", "Nurse"),
        ("Tech Linda Garcia", "Technician"),
    ],
    "Night": [
        ("Dr. William Thomas", "Doctor"),
        ("Nurse Patricia Moore", "Nurse"),
        ("Nurse Christopher Jackson", "Nurse"),
        ("Lab Tech Barbara White", "Lab Technician"),
    ],
}

STATUS_WEIGHTS = (
    (AttendanceStatus.PRESENT, 0.90),
    (AttendanceStatus.ABSENT, 0.05),
    (AttendanceStatus.LEAVE, 0.03),
    (AttendanceStatus.HALF_DAY, 0.02),
)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s:%(message)s")
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    container = build_container(db_config=db_config, jwt_secret=settings.JWT_SECRET)

    marker = None
    for u in DEMO_USERS:
        try:
            user = container.user_service.register(**u)
        except ValidationError:
            user = container.users_repo.get_by_username(u["username"])
            logger.info("User %s already exists", u["username"])
        marker = marker or user.user_id

    if container.staff_repo.list_all():
        logger.info("Staff directory not empty, skipping staff seed")
    else:
        for shift, members in DEMO_STAFF.items():
            for name, role in members:
                container.staff_service.create(name=name, role=role, shift=shift)

    rng = random.Random(42)
    statuses = [s for s, _ in STATUS_WEIGHTS]
    weights = [w for _, w in STATUS_WEIGHTS]
    today = now_local().date()
    staff = container.staff_repo.list_all()
    for offset in range(6, -1, -1):
        day = today - timedelta(days=offset)
        for member in staff:
            container.attendance_service.mark(
                staff_id=member.staff_id,
                work_date=day,
                shift=member.shift,
                status=rng.choices(statuses, weights)[0],
                marked_by=marker,
            )

    logger.info("Seeded %s staff with 7 days of attendance into %s", len(staff), db_config.get("database"))


if __name__ == "__main__":
    main()
