from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .attendees.mysql_attendee_repository import MySQLAttendeeRepository
from .attendees.repository import AttendeeRepository
from .attendees.service import RegistrationService
from .bulk.service import BulkService
from .checkin.service import CheckInService
from .common.datetime_utils import utc_now
from .core.constants import DEFAULT_QR_IMAGE_BASE_URL
from .database.connection import DBConfig, DatabaseConnection


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    attendees_repo: AttendeeRepository

    registration_service: RegistrationService
    checkin_service: CheckInService
    bulk_service: BulkService


def wire_services(
    attendees_repo: AttendeeRepository,
    *,
    conn: Optional[DatabaseConnection] = None,
    clock: Callable[[], datetime] = utc_now,
    qr_image_base_url: str = DEFAULT_QR_IMAGE_BASE_URL,
) -> Container:
    registration_service = RegistrationService(
        attendees_repo,
        clock=clock,
        qr_image_base_url=qr_image_base_url,
    )
    checkin_service = CheckInService(attendees_repo, clock=clock)
    bulk_service = BulkService(attendees_repo, registration_service)

    return Container(
        conn=conn,
        attendees_repo=attendees_repo,
        registration_service=registration_service,
        checkin_service=checkin_service,
        bulk_service=bulk_service,
    )


def build_container(*, db_config: dict, qr_image_base_url: str = DEFAULT_QR_IMAGE_BASE_URL) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire_services(
        MySQLAttendeeRepository(conn),
        conn=conn,
        qr_image_base_url=qr_image_base_url,
    )
