from __future__ import annotations

from dataclasses import dataclass

from .checkpoints.mysql_checkpoint_repository import MySQLCheckpointRepository
from .checkpoints.repository import CheckpointRepository
from .checkpoints.service import CheckpointService
from .core.constants import (
    DEFAULT_LOG_RETENTION_MONTHS,
    DEFAULT_RADIUS_METERS,
    DEFAULT_TOKEN_HOURS,
    DEFAULT_UTC_OFFSET_HOURS,
)
from .core.enums import SlotMatchPolicy
from .database.connection import DBConfig, DatabaseConnection
from .patrols.mysql_patrol_repository import MySQLPatrolLogRepository
from .patrols.repository import PatrolLogRepository
from .patrols.service import PatrolService
from .reports.service import ReportService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleService
from .users.mysql_role_repository import MySQLRoleRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import RoleRepository, UserRepository
from .users.service import AuthService, UserService
from .users.tokens import TokenService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection | None

    users_repo: UserRepository
    roles_repo: RoleRepository
    checkpoints_repo: CheckpointRepository
    patrol_logs_repo: PatrolLogRepository
    schedules_repo: ScheduleRepository

    token_service: TokenService
    auth_service: AuthService
    user_service: UserService
    checkpoint_service: CheckpointService
    patrol_service: PatrolService
    schedule_service: ScheduleService
    report_service: ReportService


def wire_services(
    *,
    conn: DatabaseConnection | None,
    users_repo: UserRepository,
    roles_repo: RoleRepository,
    checkpoints_repo: CheckpointRepository,
    patrol_logs_repo: PatrolLogRepository,
    schedules_repo: ScheduleRepository,
    jwt_secret: str,
    jwt_expires_hours: int = DEFAULT_TOKEN_HOURS,
    utc_offset_hours: int = DEFAULT_UTC_OFFSET_HOURS,
    slot_match_policy: str = SlotMatchPolicy.EXACT_HOUR.value,
    retention_months: int = DEFAULT_LOG_RETENTION_MONTHS,
    default_radius: float = DEFAULT_RADIUS_METERS,
) -> Container:
    """Build the service graph over any set of repositories (MySQL or in-memory)."""
    token_service = TokenService(jwt_secret, expires_hours=jwt_expires_hours)
    auth_service = AuthService(users_repo, roles_repo, token_service)
    user_service = UserService(users_repo, roles_repo)
    checkpoint_service = CheckpointService(checkpoints_repo, default_radius=default_radius)
    patrol_service = PatrolService(
        patrol_logs_repo,
        checkpoint_service,
        user_service,
        default_radius=default_radius,
        retention_months=retention_months,
        utc_offset_hours=utc_offset_hours,
    )
    schedule_service = ScheduleService(schedules_repo)
    report_service = ReportService(
        patrol_logs_repo,
        checkpoints_repo,
        schedule_service,
        utc_offset_hours=utc_offset_hours,
        policy=slot_match_policy,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        roles_repo=roles_repo,
        checkpoints_repo=checkpoints_repo,
        patrol_logs_repo=patrol_logs_repo,
        schedules_repo=schedules_repo,
        token_service=token_service,
        auth_service=auth_service,
        user_service=user_service,
        checkpoint_service=checkpoint_service,
        patrol_service=patrol_service,
        schedule_service=schedule_service,
        report_service=report_service,
    )


def build_container(*, db_config: dict, **settings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_services(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        roles_repo=MySQLRoleRepository(conn),
        checkpoints_repo=MySQLCheckpointRepository(conn),
        patrol_logs_repo=MySQLPatrolLogRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        **settings,
    )
