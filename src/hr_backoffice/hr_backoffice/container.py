from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.otp_cache import ExpiringCodeCache
from .core.constants import DEFAULT_LATE_GRACE_MINUTES, DEFAULT_OTP_TTL_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .payroll.aggregator import MonthlyAggregator
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.service import PayrollReportService
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import AttendanceModificationService, RequestService
from .users.mysql_user_repository import MySQLIdentityRepository
from .users.repository import IdentityRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    identities_repo: IdentityRepository
    attendance_repo: AttendanceRepository
    requests_repo: RequestRepository
    notifications_repo: NotificationRepository

    auth_service: AuthService
    attendance_service: AttendanceService
    payroll_report_service: PayrollReportService
    notification_service: NotificationService
    request_service: RequestService
    modification_service: AttendanceModificationService


def assemble(
    *,
    identities_repo: IdentityRepository,
    attendance_repo: AttendanceRepository,
    requests_repo: RequestRepository,
    notifications_repo: NotificationRepository,
    conn: Optional[DatabaseConnection] = None,
    late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    late_counts_as_present: bool = False,
    admin_otp_required: bool = False,
    otp_ttl_seconds: int = DEFAULT_OTP_TTL_SECONDS,
) -> Container:
    """Wire services over whatever repositories are given (MySQL or in-memory)."""

    auth_service = AuthService(
        identities_repo,
        otp_cache=ExpiringCodeCache(),
        otp_required=admin_otp_required,
        otp_ttl_seconds=otp_ttl_seconds,
    )
    attendance_service = AttendanceService(
        attendance_repo,
        identities_repo,
        strategy_factory=AttendanceStrategyFactory(),
        grace_minutes=late_grace_minutes,
    )
    payroll_report_service = PayrollReportService(
        identities_repo,
        MonthlyAggregator(attendance_repo, late_counts_as_present=late_counts_as_present),
        calculator=StandardPayrollCalculator(),
    )
    notification_service = NotificationService(notifications_repo, identities_repo)
    request_service = RequestService(requests_repo, identities_repo, notification_service)
    modification_service = AttendanceModificationService(
        requests_repo,
        attendance_repo,
        attendance_service,
        identities_repo,
    )

    return Container(
        conn=conn,
        identities_repo=identities_repo,
        attendance_repo=attendance_repo,
        requests_repo=requests_repo,
        notifications_repo=notifications_repo,
        auth_service=auth_service,
        attendance_service=attendance_service,
        payroll_report_service=payroll_report_service,
        notification_service=notification_service,
        request_service=request_service,
        modification_service=modification_service,
    )


def build_container(*, db_config: dict, **options) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return assemble(
        identities_repo=MySQLIdentityRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        requests_repo=MySQLRequestRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        conn=conn,
        **options,
    )
