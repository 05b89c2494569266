from __future__ import annotations

from flask import Flask

from ..auth.guards import Guards, current_user, require_current_user
from ..common.http import json_body, ok
from ..common.validators import optional_positive_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = Guards(container.auth_service)
    payments = container.payment_service

    @app.post("/api/payments/create", endpoint="payments_create")
    @guards.optional_auth
    def payments_create():
        data = json_body()
        actor = current_user()
        # Orders are tied to the signed-in caller; admins may open one on behalf of a customer.
        user_id = None
        if actor is not None:
            user_id = actor.user_id
            if actor.is_admin and data.get("user_id"):
                user_id = optional_positive_int(data.get("user_id"), "user_id")

        order = payments.create_order(
            plan_id=optional_positive_int(data.get("plan_id"), "plan_id"),
            customer_name=data.get("customer_name"),
            customer_email=data.get("customer_email"),
            customer_phone=data.get("customer_phone"),
            user_id=user_id,
        )
        body = {
            "order_id": order.order_id,
            "amount": order.amount,
            "currency": order.currency,
            "payment_id": order.payment_id,
            "demo": order.demo,
        }
        if order.demo:
            body["message"] = "Demo mode - Payment will be simulated"
        return ok(body, 201)

    @app.post("/api/payments/verify", endpoint="payments_verify")
    def payments_verify():
        data = json_body()
        verified = payments.verify(
            order_id=data.get("order_id"),
            payment_id=data.get("payment_id"),
            signature=data.get("signature"),
        )
        message = "Payment verified successfully"
        if verified.demo:
            message += " (Demo Mode)"
        return ok({"message": message, "payment": verified.payment, "demo": verified.demo})

    @app.get("/api/payments/all", endpoint="payments_all")
    @guards.require_admin
    def payments_all():
        return ok(payments.list_all())

    @app.get("/api/payments/mine", endpoint="payments_mine")
    @guards.require_auth
    def payments_mine():
        return ok(payments.list_for_user(require_current_user().user_id))

    @app.get("/api/payments/<int:payment_id>", endpoint="payments_get")
    @guards.require_auth
    def payments_get(payment_id: int):
        return ok(payments.get(actor=require_current_user(), payment_id=payment_id))
