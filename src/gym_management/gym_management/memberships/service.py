from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.enums import DurationUnit, MembershipStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..plans.model import Plan
from ..plans.repository import PlanRepository
from ..users.model import Membership, User
from ..users.repository import UserRepository
from .policy import add_duration, compute_end_date, days_until_expiry, is_membership_active

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MembershipStatusView:
    membership: Optional[Membership]
    is_active: bool
    days_until_expiry: Optional[int]
    role: Role


class MembershipService:
    """Use cases: activate, renew, cancel and report memberships."""

    def __init__(self, users: UserRepository, plans: PlanRepository, payments=None):
        self._users = users
        self._plans = plans
        # Optional PaymentRepository; only used to flag `membership_activated`.
        self._payments = payments

    def _get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def _get_plan(self, plan_id: int) -> Plan:
        plan = self._plans.get_by_id(plan_id)
        if not plan:
            raise NotFoundError("Plan not found")
        return plan

    @staticmethod
    def _ensure_owner_or_admin(actor: User, user_id: int) -> None:
        if actor.user_id != int(user_id) and not actor.is_admin:
            raise AuthorizationError("Not authorized")

    @staticmethod
    def _promoted(role: Role) -> Role:
        return Role.MEMBER if role == Role.VISITOR else role

    def activate(
        self,
        *,
        user_id: int,
        plan_id: int,
        payment_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> User:
        if not user_id or not plan_id:
            raise ValidationError("user_id and plan_id are required")

        user = self._get_user(user_id)
        plan = self._get_plan(plan_id)

        start = start or now or now_local()
        end = end or compute_end_date(start, plan.duration)
        if end <= start:
            raise ValidationError("End date must be after start date")

        membership = Membership(
            plan_id=plan.plan_id,
            plan_name=plan.name,
            start_date=start,
            end_date=end,
            status=MembershipStatus.ACTIVE,
            auto_renew=user.membership.auto_renew if user.membership else False,
        )
        self._users.save_membership(user.user_id, membership=membership, role=self._promoted(user.role))

        if payment_id and self._payments is not None:
            self._payments.mark_membership_activated(int(payment_id))

        logger.info("Activated %s for user %s until %s", plan.name, user.user_id, end.isoformat())
        return self._get_user(user.user_id)

    def renew(
        self,
        *,
        actor: User,
        user_id: int,
        plan_id: Optional[int] = None,
        months: Optional[int] = None,
        start: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> User:
        self._ensure_owner_or_admin(actor, user_id)
        user = self._get_user(user_id)
        current = user.membership

        plan_id = plan_id or (current.plan_id if current else None)
        if not plan_id:
            raise ValidationError("plan_id is required")
        plan = self._get_plan(plan_id)

        renew_from = start or (current.end_date if current else None) or now or now_local()
        if months is not None:
            if int(months) < 1:
                raise ValidationError("months must be positive")
            end = add_duration(renew_from, int(months), DurationUnit.MONTH)
        else:
            end = compute_end_date(renew_from, plan.duration)

        membership = Membership(
            plan_id=plan.plan_id,
            plan_name=plan.name,
            start_date=(current.start_date if current and current.start_date else renew_from),
            end_date=end,
            status=MembershipStatus.ACTIVE,
            auto_renew=current.auto_renew if current else False,
        )
        self._users.save_membership(user.user_id, membership=membership, role=self._promoted(user.role))
        logger.info("Renewed membership of user %s until %s", user.user_id, end.isoformat())
        return self._get_user(user.user_id)

    def status(self, *, actor: User, user_id: int, now: Optional[datetime] = None) -> MembershipStatusView:
        self._ensure_owner_or_admin(actor, user_id)
        user = self._get_user(user_id)
        now = now or now_local()
        return MembershipStatusView(
            membership=user.membership,
            is_active=is_membership_active(user.membership, now),
            days_until_expiry=days_until_expiry(user.membership, now),
            role=user.role,
        )

    def cancel(self, *, user_id: int) -> User:
        user = self._get_user(user_id)
        if user.membership is not None:
            cancelled = replace(user.membership, status=MembershipStatus.CANCELLED)
            self._users.save_membership(user.user_id, membership=cancelled, role=user.role)
            logger.info("Cancelled membership of user %s", user.user_id)
        return self._get_user(user.user_id)

    def override(
        self,
        *,
        user_id: int,
        plan_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        status: Optional[MembershipStatus] = None,
    ) -> User:
        """Admin edit of individual membership fields."""

        user = self._get_user(user_id)
        current = user.membership or Membership(plan_id=None, plan_name=None, start_date=None, end_date=None)

        if plan_id:
            plan = self._get_plan(plan_id)
            current = replace(current, plan_id=plan.plan_id, plan_name=plan.name)
        if start is not None:
            current = replace(current, start_date=start)
        if end is not None:
            current = replace(current, end_date=end)
        if status is not None:
            current = replace(current, status=status)

        if current.start_date and current.end_date and current.end_date <= current.start_date:
            raise ValidationError("End date must be after start date")

        role = self._promoted(user.role) if current.status == MembershipStatus.ACTIVE else user.role
        self._users.save_membership(user.user_id, membership=current, role=role)
        return self._get_user(user.user_id)

    def expire_lapsed(self, now: Optional[datetime] = None) -> int:
        count = self._users.expire_lapsed(now or now_local())
        if count:
            logger.info("Expired %d lapsed memberships", count)
        return count
