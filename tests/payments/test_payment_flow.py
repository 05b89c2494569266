from decimal import Decimal

import pytest

from src.gym_management.gym_management.core.enums import MembershipStatus, PaymentStatus, Role
from src.gym_management.gym_management.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.gym_management.gym_management.memberships.service import MembershipService
from src.gym_management.gym_management.payments.gateway import (
    DEMO_SIGNATURE,
    DemoGateway,
    GatewayOrder,
    build_gateway,
)
from src.gym_management.gym_management.payments.service import PaymentService, to_minor_units


class StubLiveGateway:
    demo = False

    def create_order(self, *, amount, currency, receipt, notes):
        return GatewayOrder(order_id="order_live_1", amount=amount, currency=currency)

    def verify_signature(self, *, order_id, payment_id, signature):
        return signature == "good"


def test_minor_units():
    assert to_minor_units(Decimal("2499")) == 249900
    assert to_minor_units(Decimal("999.50")) == 99950


def test_demo_gateway_when_credentials_missing():
    assert isinstance(build_gateway(demo_mode=False, key_id="", key_secret=""), DemoGateway)
    assert isinstance(build_gateway(demo_mode=True, key_id="rzp_x", key_secret="s"), DemoGateway)


def test_demo_order_ids_are_unique():
    gw = DemoGateway()
    ids = {gw.create_order(amount=1, currency="INR", receipt="r", notes={}).order_id for _ in range(50)}
    assert len(ids) == 50
    assert all(i.startswith("order_demo_") for i in ids)


def test_demo_checkout_activates_membership(container, repos):
    plan = repos.plans.add("Pro", "2499", "3 Months")
    visitor = repos.add_user(Role.VISITOR)

    order = container.payment_service.create_order(plan_id=plan.plan_id, user_id=visitor.user_id)

    assert order.demo is True
    assert order.amount == 249900
    assert order.currency == "INR"
    pending = repos.payments.get_by_id(order.payment_id)
    assert pending.status == PaymentStatus.PENDING
    assert pending.customer_email == visitor.email

    result = container.payment_service.verify(order_id=order.order_id)

    assert result.demo is True
    assert result.payment.status == PaymentStatus.COMPLETED
    assert result.payment.provider_payment_id.startswith("pay_demo_")
    assert result.payment.signature == DEMO_SIGNATURE
    assert result.payment.membership_activated is True

    user = repos.users.get_by_id(visitor.user_id)
    assert user.role == Role.MEMBER
    assert user.membership.status == MembershipStatus.ACTIVE
    assert user.membership.plan_id == plan.plan_id


def test_verify_twice_does_not_reactivate(container, repos):
    plan = repos.plans.add("Basic", "999", "1 Month")
    member = repos.add_user(Role.MEMBER)
    order = container.payment_service.create_order(plan_id=plan.plan_id, user_id=member.user_id)

    container.payment_service.verify(order_id=order.order_id)
    first_end = repos.users.get_by_id(member.user_id).membership.end_date
    container.payment_service.verify(order_id=order.order_id)

    assert repos.users.get_by_id(member.user_id).membership.end_date == first_end


def test_guest_checkout_completes_without_activation(container, repos):
    plan = repos.plans.add("Basic", "999", "1 Month")

    order = container.payment_service.create_order(
        plan_id=plan.plan_id, customer_name="Guest", customer_email="Guest@Example.com"
    )
    result = container.payment_service.verify(order_id=order.order_id)

    assert result.payment.user_id is None
    assert result.payment.status == PaymentStatus.COMPLETED
    assert result.payment.membership_activated is False


def test_create_order_validation(container, repos):
    plan = repos.plans.add("Basic", "999", "1 Month")
    svc = container.payment_service

    with pytest.raises(ValidationError):
        svc.create_order(plan_id=plan.plan_id, customer_name="No Email")
    with pytest.raises(ValidationError):
        svc.create_order(plan_id=None, customer_name="A", customer_email="a@b.co")
    with pytest.raises(NotFoundError):
        svc.create_order(plan_id=99, customer_name="A", customer_email="a@b.co")
    with pytest.raises(NotFoundError):
        svc.create_order(plan_id=plan.plan_id, user_id=99)


def test_verify_validation(container):
    with pytest.raises(ValidationError):
        container.payment_service.verify(order_id="")
    with pytest.raises(NotFoundError):
        container.payment_service.verify(order_id="order_unknown")


def test_live_mode_checks_signature(repos):
    plan = repos.plans.add("Basic", "999", "1 Month")
    member = repos.add_user(Role.VISITOR)
    memberships = MembershipService(repos.users, repos.plans, repos.payments)
    svc = PaymentService(repos.payments, repos.plans, repos.users, memberships, StubLiveGateway())

    order = svc.create_order(plan_id=plan.plan_id, user_id=member.user_id)
    assert order.demo is False

    with pytest.raises(ValidationError, match="Missing payment verification details"):
        svc.verify(order_id=order.order_id)
    with pytest.raises(ValidationError, match="Invalid payment signature"):
        svc.verify(order_id=order.order_id, payment_id="pay_1", signature="bad")

    result = svc.verify(order_id=order.order_id, payment_id="pay_1", signature="good")
    assert result.payment.provider_payment_id == "pay_1"
    assert repos.users.get_by_id(member.user_id).role == Role.MEMBER


def test_get_payment_is_owner_or_admin(container, repos):
    plan = repos.plans.add("Basic", "999", "1 Month")
    owner = repos.add_user(Role.MEMBER)
    other = repos.add_user(Role.MEMBER)
    admin = repos.add_user(Role.ADMIN)
    order = container.payment_service.create_order(plan_id=plan.plan_id, user_id=owner.user_id)

    assert container.payment_service.get(actor=owner, payment_id=order.payment_id).order_id == order.order_id
    assert container.payment_service.get(actor=admin, payment_id=order.payment_id).order_id == order.order_id
    with pytest.raises(AuthorizationError):
        container.payment_service.get(actor=other, payment_id=order.payment_id)
    assert [p.payment_id for p in container.payment_service.list_for_user(owner.user_id)] == [order.payment_id]
