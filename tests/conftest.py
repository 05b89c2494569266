from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.gym_management.gym_management.attendance.model import AttendanceListRow, AttendanceRecord
from src.gym_management.gym_management.auth.tokens import TokenService
from src.gym_management.gym_management.container import Container, wire_container
from src.gym_management.gym_management.core.constants import EXPIRING_SOON_DAYS
from src.gym_management.gym_management.core.enums import (
    AttendanceStatus,
    MembershipStatus,
    PaymentStatus,
    Role,
)
from src.gym_management.gym_management.core.exceptions import ConflictError
from src.gym_management.gym_management.payments.gateway import DemoGateway
from src.gym_management.gym_management.payments.model import Payment
from src.gym_management.gym_management.plans.model import Plan
from src.gym_management.gym_management.progress.model import ProgressEntry
from src.gym_management.gym_management.transformations.model import Transformation, TransformationView
from src.gym_management.gym_management.users.model import CustomerFilter, Membership, User


# ---- In-memory repositories -------------------------------------------------


class InMemoryUsers:
    def __init__(self):
        self.by_id: dict[int, User] = {}
        self._id = 0

    def add(self, user: User) -> User:
        self._id = max(self._id, user.user_id)
        self.by_id[user.user_id] = user
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.by_id.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.by_id.values() if u.email == email.lower()), None)

    def create_user(self, *, name, email, password_hash, phone, role) -> int:
        if self.get_by_email(email):
            raise ConflictError("Duplicate entry")
        self._id += 1
        self.by_id[self._id] = User(
            user_id=self._id,
            name=name,
            email=email.lower(),
            password_hash=password_hash,
            role=role,
            phone=phone,
        )
        return self._id

    def _update(self, user_id: int, **changes) -> bool:
        user = self.by_id.get(int(user_id))
        if not user:
            return False
        self.by_id[user.user_id] = replace(user, **changes)
        return True

    def update_profile(self, user_id, *, name, phone, profile_image) -> bool:
        return self._update(user_id, name=name, phone=phone, profile_image=profile_image)

    def touch_last_login(self, user_id, at) -> None:
        self._update(user_id, last_login=at)

    def set_role(self, user_id, role) -> bool:
        return self._update(user_id, role=role)

    def set_active(self, user_id, *, is_active) -> bool:
        return self._update(user_id, is_active=is_active)

    def set_notes(self, user_id, notes) -> bool:
        return self._update(user_id, notes=notes)

    def save_membership(self, user_id, *, membership, role) -> bool:
        return self._update(user_id, membership=membership, role=role)

    def expire_lapsed(self, now: datetime) -> int:
        count = 0
        for user in list(self.by_id.values()):
            m = user.membership
            if m and m.status == MembershipStatus.ACTIVE and m.end_date and m.end_date <= now:
                self._update(user.user_id, membership=replace(m, status=MembershipStatus.EXPIRED))
                count += 1
        return count

    def delete_by_id(self, user_id) -> bool:
        return self.by_id.pop(int(user_id), None) is not None

    def search(self, filters: CustomerFilter, *, now, offset, limit):
        def keep(u: User) -> bool:
            m = u.membership
            if filters.role is not None and u.role != filters.role:
                return False
            status = filters.membership_status
            if status == "active" and not (
                m and m.status == MembershipStatus.ACTIVE and (m.end_date is None or m.end_date > now)
            ):
                return False
            if status == "expired" and not (
                m
                and (
                    m.status == MembershipStatus.EXPIRED
                    or (m.status == MembershipStatus.ACTIVE and m.end_date and m.end_date <= now)
                )
            ):
                return False
            if status in {"cancelled", "pending"} and not (m and m.status.value == status):
                return False
            if status == "none" and m is not None:
                return False
            if filters.expiring_soon and not (
                m
                and m.status == MembershipStatus.ACTIVE
                and m.end_date
                and now < m.end_date <= now + timedelta(days=EXPIRING_SOON_DAYS)
            ):
                return False
            if filters.search:
                needle = filters.search.lower()
                if needle not in u.name.lower() and needle not in u.email.lower():
                    return False
            return True

        matched = sorted((u for u in self.by_id.values() if keep(u)), key=lambda u: u.user_id, reverse=True)
        return matched[offset : offset + limit], len(matched)


class InMemoryPlans:
    def __init__(self):
        self.by_id: dict[int, Plan] = {}
        self._id = 0

    def add(self, name: str, price: str, duration: str, **extra) -> Plan:
        self._id += 1
        plan = Plan(plan_id=self._id, name=name, price=Decimal(price), duration=duration, **extra)
        self.by_id[plan.plan_id] = plan
        return plan

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda p: (p.price, p.plan_id))

    def get_by_id(self, plan_id):
        return self.by_id.get(int(plan_id))

    def create(self, *, name, price, duration, features, popular, description) -> int:
        plan = self.add(name, str(price), duration, features=features, popular=popular, description=description)
        return plan.plan_id

    def update(self, plan_id, **fields) -> bool:
        self.by_id[int(plan_id)] = replace(self.by_id[int(plan_id)], **fields)
        return True

    def delete_by_id(self, plan_id) -> bool:
        return self.by_id.pop(int(plan_id), None) is not None


class InMemoryPayments:
    def __init__(self):
        self.by_id: dict[int, Payment] = {}
        self._id = 0

    def create(self, *, order_id, user_id, plan_id, plan_name, amount, currency, customer_name, customer_email, customer_phone) -> int:
        if any(p.order_id == order_id for p in self.by_id.values()):
            raise ConflictError("Duplicate entry")
        self._id += 1
        self.by_id[self._id] = Payment(
            payment_id=self._id,
            order_id=order_id,
            user_id=user_id,
            plan_id=plan_id,
            plan_name=plan_name,
            amount=amount,
            currency=currency,
            customer_name=customer_name,
            customer_email=customer_email,
            customer_phone=customer_phone,
        )
        return self._id

    def get_by_id(self, payment_id):
        return self.by_id.get(int(payment_id))

    def get_by_order_id(self, order_id):
        return next((p for p in self.by_id.values() if p.order_id == order_id), None)

    def mark_completed(self, payment_id, *, provider_payment_id, signature) -> bool:
        p = self.by_id[int(payment_id)]
        self.by_id[p.payment_id] = replace(
            p, provider_payment_id=provider_payment_id, signature=signature, status=PaymentStatus.COMPLETED
        )
        return True

    def mark_membership_activated(self, payment_id) -> bool:
        p = self.by_id.get(int(payment_id))
        if not p:
            return False
        self.by_id[p.payment_id] = replace(p, membership_activated=True)
        return True

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda p: p.payment_id, reverse=True)

    def list_for_user(self, user_id, *, limit=None):
        items = [p for p in self.list_all() if p.user_id == int(user_id)]
        return items if limit is None else items[:limit]


class InMemoryAttendance:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self.by_id: dict[int, AttendanceRecord] = {}
        self._id = 0

    def add(self, user_id: int, work_date: date, *, minutes: Optional[int] = None) -> AttendanceRecord:
        check_in = datetime.combine(work_date, datetime.min.time()).replace(hour=7)
        self._id += 1
        rec = AttendanceRecord(
            attendance_id=self._id,
            user_id=user_id,
            work_date=work_date,
            check_in_time=check_in,
            check_out_time=check_in + timedelta(minutes=minutes) if minutes is not None else None,
            status=AttendanceStatus.CHECKED_OUT if minutes is not None else AttendanceStatus.CHECKED_IN,
            duration_minutes=minutes,
        )
        self.by_id[rec.attendance_id] = rec
        return rec

    def get_by_id(self, attendance_id):
        return self.by_id.get(int(attendance_id))

    def get_for_user_and_date(self, user_id, work_date):
        return next(
            (r for r in self.by_id.values() if r.user_id == int(user_id) and r.work_date == work_date),
            None,
        )

    def _newest_first(self, records):
        return sorted(records, key=lambda r: (r.work_date, r.check_in_time), reverse=True)

    def list_for_user(self, user_id, *, start_date=None, end_date=None, limit):
        items = [
            r
            for r in self.by_id.values()
            if r.user_id == int(user_id)
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]
        return self._newest_first(items)[:limit]

    def list_dates_for_user(self, user_id, *, until):
        dates = {r.work_date for r in self.by_id.values() if r.user_id == int(user_id) and r.work_date <= until}
        return sorted(dates, reverse=True)

    def create_checkin(self, *, user_id, work_date, check_in_time) -> int:
        if self.get_for_user_and_date(user_id, work_date):
            raise ConflictError("Duplicate entry")
        self._id += 1
        self.by_id[self._id] = AttendanceRecord(
            attendance_id=self._id,
            user_id=int(user_id),
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=None,
            status=AttendanceStatus.CHECKED_IN,
        )
        return self._id

    def update_checkout(self, *, attendance_id, check_out_time, duration_minutes) -> bool:
        rec = self.by_id[int(attendance_id)]
        self.by_id[rec.attendance_id] = replace(
            rec,
            check_out_time=check_out_time,
            duration_minutes=duration_minutes,
            status=AttendanceStatus.CHECKED_OUT,
        )
        return True

    def list_rows(self, *, start_date=None, end_date=None, user_id=None, limit=None):
        items = [
            r
            for r in self.by_id.values()
            if (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
            and (user_id is None or r.user_id == int(user_id))
        ]
        items = self._newest_first(items)
        if limit is not None:
            items = items[:limit]
        rows = []
        for r in items:
            u = self._users.get_by_id(r.user_id)
            rows.append(
                AttendanceListRow(
                    record=r,
                    user_name=u.name if u else None,
                    user_email=u.email if u else None,
                    user_role=u.role.value if u else None,
                )
            )
        return rows

    def delete_by_id(self, attendance_id) -> bool:
        return self.by_id.pop(int(attendance_id), None) is not None


class InMemoryContent:
    """Works for both workout and diet plans."""

    def __init__(self):
        self.by_id: dict = {}
        self._id = 0

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda p: p.plan_id, reverse=True)

    def get_by_id(self, plan_id):
        return self.by_id.get(int(plan_id))

    def create(self, plan) -> int:
        self._id += 1
        self.by_id[self._id] = replace(plan, plan_id=self._id)
        return self._id

    def update(self, plan) -> bool:
        self.by_id[plan.plan_id] = plan
        return True

    def delete_by_id(self, plan_id) -> bool:
        return self.by_id.pop(int(plan_id), None) is not None


class InMemoryProgress:
    def __init__(self):
        self.by_id: dict[int, ProgressEntry] = {}
        self._id = 0

    def create(self, entry) -> int:
        self._id += 1
        self.by_id[self._id] = replace(entry, entry_id=self._id)
        return self._id

    def get_by_id(self, entry_id):
        return self.by_id.get(int(entry_id))

    def list_for_user(self, user_id):
        items = [e for e in self.by_id.values() if e.user_id == int(user_id)]
        return sorted(items, key=lambda e: (e.entry_date, e.entry_id), reverse=True)

    def update(self, entry) -> bool:
        self.by_id[entry.entry_id] = entry
        return True

    def delete_by_id(self, entry_id) -> bool:
        return self.by_id.pop(int(entry_id), None) is not None


class InMemoryTransformations:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self.by_id: dict[int, Transformation] = {}
        self._id = 0

    def create(self, *, user_id, before_image, after_image, story) -> int:
        self._id += 1
        self.by_id[self._id] = Transformation(
            transformation_id=self._id,
            user_id=int(user_id),
            before_image=before_image,
            after_image=after_image,
            story=story,
        )
        return self._id

    def get_by_id(self, transformation_id):
        return self.by_id.get(int(transformation_id))

    def has_pending(self, user_id) -> bool:
        return any(t.user_id == int(user_id) and not t.approved for t in self.by_id.values())

    def list_views(self, *, approved_only, user_id=None):
        items = [
            t
            for t in self.by_id.values()
            if (not approved_only or t.approved) and (user_id is None or t.user_id == int(user_id))
        ]
        items.sort(key=lambda t: t.transformation_id, reverse=True)
        views = []
        for t in items:
            u = self._users.get_by_id(t.user_id)
            views.append(TransformationView(transformation=t, user_name=u.name if u else None))
        return views

    def approve(self, transformation_id, *, featured) -> bool:
        t = self.by_id[int(transformation_id)]
        self.by_id[t.transformation_id] = replace(t, approved=True, featured=featured)
        return True

    def delete_by_id(self, transformation_id) -> bool:
        return self.by_id.pop(int(transformation_id), None) is not None


# ---- Fixtures -----------------------------------------------------------------


@dataclass
class Repos:
    users: InMemoryUsers
    plans: InMemoryPlans
    payments: InMemoryPayments
    attendance: InMemoryAttendance
    workouts: InMemoryContent
    diets: InMemoryContent
    progress: InMemoryProgress
    transformations: InMemoryTransformations

    def add_user(
        self,
        role: Role = Role.MEMBER,
        *,
        email: Optional[str] = None,
        password: str = "secret123",
        membership: Optional[Membership] = None,
        is_active: bool = True,
    ) -> User:
        user_id = self.users._id + 1
        return self.users.add(
            User(
                user_id=user_id,
                name=f"{role.value.title()} {user_id}",
                email=email or f"{role.value}{user_id}@gym.test",
                password_hash=generate_password_hash(password),
                role=role,
                membership=membership,
                is_active=is_active,
            )
        )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 10, 9, 30, 0)


@pytest.fixture
def repos() -> Repos:
    users = InMemoryUsers()
    return Repos(
        users=users,
        plans=InMemoryPlans(),
        payments=InMemoryPayments(),
        attendance=InMemoryAttendance(users),
        workouts=InMemoryContent(),
        diets=InMemoryContent(),
        progress=InMemoryProgress(),
        transformations=InMemoryTransformations(users),
    )


@pytest.fixture
def container(repos: Repos) -> Container:
    return wire_container(
        users_repo=repos.users,
        plans_repo=repos.plans,
        payments_repo=repos.payments,
        attendance_repo=repos.attendance,
        workouts_repo=repos.workouts,
        diets_repo=repos.diets,
        progress_repo=repos.progress,
        transformations_repo=repos.transformations,
        tokens=TokenService("test-jwt-secret"),
        gateway=DemoGateway(),
    )


@pytest.fixture
def app(container: Container, monkeypatch):
    from src.gym_management.gym_management.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header(container: Container):
    def _header(user: User) -> dict:
        token = container.tokens.issue(user_id=user.user_id, role=user.role)
        return {"Authorization": f"Bearer {token}"}

    return _header
