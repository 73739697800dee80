from types import SimpleNamespace
from unittest.mock import patch, MagicMock

import pytest
import stripe
from fastapi import HTTPException

from service_modules.subscription_service import subscription_service, NOT_CONFIGURED_MESSAGE


def _event(event_type, obj):
    return SimpleNamespace(type=event_type, data=SimpleNamespace(object=obj))


def _tier(client, user):
    return client.get("/api/profile", headers=user["headers"]).json()["subscription_tier"]


def test_plans(client):
    plans = client.get("/api/subscriptions/plans").json()
    assert [(p["id"], p["price"], p["priceId"]) for p in plans] == [
        ("free", 0, None),
        ("premium", 19.99, "price_premium_monthly"),
        ("pro", 49.99, "price_pro_monthly"),
    ]


def test_checkout_without_stripe(athlete, client):
    response = client.post(
        "/api/subscriptions/checkout", headers=athlete["headers"], json={"priceId": "price_premium_monthly"}
    )
    assert response.status_code == 503
    assert response.json()["detail"] == NOT_CONFIGURED_MESSAGE


def test_checkout_unknown_price(athlete, client):
    response = client.post("/api/subscriptions/checkout", headers=athlete["headers"], json={"priceId": "price_x"})
    assert response.status_code == 400


def test_checkout_session(athlete, client, monkeypatch):
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_" + "a" * 30)
    session = MagicMock(id="cs_test_1", url="https://checkout.stripe.com/c/pay/cs_test_1")
    with patch("stripe.checkout.Session.create", return_value=session) as create:
        response = client.post(
            "/api/subscriptions/checkout", headers=athlete["headers"], json={"priceId": "price_pro_monthly"}
        )
    assert response.status_code == 200
    assert response.json()["url"] == "https://checkout.stripe.com/c/pay/cs_test_1"
    params = create.call_args.kwargs
    assert params["client_reference_id"] == athlete["id"]
    assert params["metadata"]["tier"] == "pro"
    assert params["customer_email"] == athlete["email"]


def test_checkout_stripe_error(athlete, client, monkeypatch):
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_" + "a" * 30)
    with patch("stripe.checkout.Session.create", side_effect=stripe.StripeError("card declined")):
        response = client.post(
            "/api/subscriptions/checkout", headers=athlete["headers"], json={"priceId": "price_pro_monthly"}
        )
    assert response.status_code == 400


def test_checkout_for_another_user(athlete, client):
    response = client.post(
        "/api/subscriptions/checkout", headers=athlete["headers"],
        json={"priceId": "price_pro_monthly", "userId": "someone-else"}
    )
    assert response.status_code == 403


def test_webhook_upgrades_then_downgrades(athlete, client):
    completed = _event("checkout.session.completed", SimpleNamespace(
        id="cs_1", client_reference_id=athlete["id"], metadata={"tier": "premium"}, customer="cus_abc"
    ))
    with patch("stripe.Webhook.construct_event", return_value=completed):
        response = client.post("/webhook/stripe", content=b"{}", headers={"Stripe-Signature": "t=1,v1=sig"})
    assert response.status_code == 200
    assert _tier(client, athlete) == "premium"

    session = client.get("/api/auth/session", headers=athlete["headers"]).json()
    assert session["has_active_subscription"] is True

    deleted = _event("customer.subscription.deleted", SimpleNamespace(id="sub_1", customer="cus_abc"))
    with patch("stripe.Webhook.construct_event", return_value=deleted):
        client.post("/webhook/stripe", content=b"{}", headers={"Stripe-Signature": "t=1,v1=sig"})
    profile = client.get("/api/profile", headers=athlete["headers"]).json()
    assert profile["subscription_tier"] == "free"
    assert profile["subscription_status"] == "canceled"


def test_webhook_bad_signature(client):
    error = stripe.SignatureVerificationError("bad signature", "t=1,v1=sig")
    with patch("stripe.Webhook.construct_event", side_effect=error):
        response = client.post("/webhook/stripe", content=b"{}", headers={"Stripe-Signature": "t=1,v1=sig"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid signature"


def test_cancel_subscription(premium_athlete, client):
    response = client.post("/api/subscriptions/cancel", headers=premium_athlete["headers"])
    assert response.json()["subscription_tier"] == "free"
    assert _tier(client, premium_athlete) == "free"


def test_subscription_statuses(athlete):
    subscription_service.update_subscription(athlete["id"], "premium", "expired")
    with pytest.raises(HTTPException) as exc:
        subscription_service.update_subscription(athlete["id"], "premium", "past_due")
    assert exc.value.status_code == 400
