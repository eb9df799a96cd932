from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .customers.mysql_customer_repository import MySQLCustomerRepository
from .customers.repository import CustomerRepository
from .customers.service import CustomerService
from .database.connection import DBConfig, DatabaseConnection
from .dropins.mysql_dropin_repository import MySQLDropinRepository
from .dropins.repository import DropinRepository
from .dropins.service import DropinService
from .languages.mysql_language_repository import MySQLLanguageRepository
from .languages.repository import LanguageRepository
from .languages.service import LanguageService
from .statistics.mysql_statistics_repository import MySQLStatisticsRepository
from .statistics.repository import StatisticsRepository
from .statistics.service import StatisticsService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    customers_repo: CustomerRepository
    attendance_repo: AttendanceRepository
    dropins_repo: DropinRepository
    languages_repo: LanguageRepository
    statistics_repo: StatisticsRepository

    auth_service: AuthService
    customer_service: CustomerService
    attendance_service: AttendanceService
    dropin_service: DropinService
    language_service: LanguageService
    statistics_service: StatisticsService


def wire(
    *,
    users_repo: UserRepository,
    customers_repo: CustomerRepository,
    attendance_repo: AttendanceRepository,
    dropins_repo: DropinRepository,
    languages_repo: LanguageRepository,
    statistics_repo: StatisticsRepository,
) -> Container:
    """Build services on top of any set of repositories (MySQL or in-memory)."""
    language_service = LanguageService(languages_repo)
    attendance_service = AttendanceService(attendance_repo, customers_repo)
    dropin_service = DropinService(dropins_repo)

    return Container(
        users_repo=users_repo,
        customers_repo=customers_repo,
        attendance_repo=attendance_repo,
        dropins_repo=dropins_repo,
        languages_repo=languages_repo,
        statistics_repo=statistics_repo,
        auth_service=AuthService(users_repo),
        customer_service=CustomerService(customers_repo, attendance_service, language_service, dropin_service),
        attendance_service=attendance_service,
        dropin_service=dropin_service,
        language_service=language_service,
        statistics_service=StatisticsService(statistics_repo),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        users_repo=MySQLUserRepository(conn),
        customers_repo=MySQLCustomerRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        dropins_repo=MySQLDropinRepository(conn),
        languages_repo=MySQLLanguageRepository(conn),
        statistics_repo=MySQLStatisticsRepository(conn),
    )
