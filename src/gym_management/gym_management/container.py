from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.tokens import TokenService
from .content.mysql_content_repository import MySQLDietPlanRepository, MySQLWorkoutPlanRepository
from .content.repository import DietPlanRepository, WorkoutPlanRepository
from .content.service import DietPlanService, WorkoutPlanService
from .core.constants import DEFAULT_CURRENCY, DEFAULT_TOKEN_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .memberships.service import MembershipService
from .payments.gateway import PaymentGateway, build_gateway
from .payments.mysql_payment_repository import MySQLPaymentRepository
from .payments.repository import PaymentRepository
from .payments.service import PaymentService
from .plans.mysql_plan_repository import MySQLPlanRepository
from .plans.repository import PlanRepository
from .plans.service import PlanService
from .progress.mysql_progress_repository import MySQLProgressRepository
from .progress.repository import ProgressRepository
from .progress.service import ProgressService
from .transformations.mysql_transformation_repository import MySQLTransformationRepository
from .transformations.repository import TransformationRepository
from .transformations.service import TransformationService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    plans_repo: PlanRepository
    payments_repo: PaymentRepository
    attendance_repo: AttendanceRepository
    workouts_repo: WorkoutPlanRepository
    diets_repo: DietPlanRepository
    progress_repo: ProgressRepository
    transformations_repo: TransformationRepository

    tokens: TokenService
    gateway: PaymentGateway

    auth_service: AuthService
    user_service: UserService
    plan_service: PlanService
    membership_service: MembershipService
    payment_service: PaymentService
    attendance_service: AttendanceService
    workout_service: WorkoutPlanService
    diet_service: DietPlanService
    progress_service: ProgressService
    transformation_service: TransformationService


def wire_container(
    *,
    users_repo: UserRepository,
    plans_repo: PlanRepository,
    payments_repo: PaymentRepository,
    attendance_repo: AttendanceRepository,
    workouts_repo: WorkoutPlanRepository,
    diets_repo: DietPlanRepository,
    progress_repo: ProgressRepository,
    transformations_repo: TransformationRepository,
    tokens: TokenService,
    gateway: PaymentGateway,
    currency: str = DEFAULT_CURRENCY,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of any repository implementations (MySQL or in-memory)."""

    membership_service = MembershipService(users_repo, plans_repo, payments_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        plans_repo=plans_repo,
        payments_repo=payments_repo,
        attendance_repo=attendance_repo,
        workouts_repo=workouts_repo,
        diets_repo=diets_repo,
        progress_repo=progress_repo,
        transformations_repo=transformations_repo,
        tokens=tokens,
        gateway=gateway,
        auth_service=AuthService(users_repo, tokens),
        user_service=UserService(users_repo),
        plan_service=PlanService(plans_repo),
        membership_service=membership_service,
        payment_service=PaymentService(
            payments_repo,
            plans_repo,
            users_repo,
            membership_service,
            gateway,
            currency=currency,
        ),
        attendance_service=AttendanceService(attendance_repo, users_repo),
        workout_service=WorkoutPlanService(workouts_repo),
        diet_service=DietPlanService(diets_repo),
        progress_service=ProgressService(progress_repo),
        transformation_service=TransformationService(transformations_repo),
    )


def build_container(
    *,
    db_config: dict,
    jwt_secret: str,
    jwt_expires_days: int = DEFAULT_TOKEN_DAYS,
    demo_mode: bool = True,
    razorpay_key_id: Optional[str] = None,
    razorpay_key_secret: Optional[str] = None,
    currency: str = DEFAULT_CURRENCY,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        plans_repo=MySQLPlanRepository(conn),
        payments_repo=MySQLPaymentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        workouts_repo=MySQLWorkoutPlanRepository(conn),
        diets_repo=MySQLDietPlanRepository(conn),
        progress_repo=MySQLProgressRepository(conn),
        transformations_repo=MySQLTransformationRepository(conn),
        tokens=TokenService(jwt_secret, expires_days=jwt_expires_days),
        gateway=build_gateway(demo_mode=demo_mode, key_id=razorpay_key_id, key_secret=razorpay_key_secret),
        currency=currency,
    )
