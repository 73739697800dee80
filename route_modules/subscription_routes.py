"""
Subscription Routes - plans, checkout and the Stripe webhook.
"""
from fastapi import APIRouter, Depends, Header, Request, HTTPException
from typing import Optional
from auth import get_current_user
from models import CheckoutRequest
from models_orm import UserORM
from service_modules.subscription_service import get_subscription_service, SubscriptionService

router = APIRouter()


@router.get("/api/subscriptions/plans")
async def get_plans(service: SubscriptionService = Depends(get_subscription_service)):
    return service.get_plans()


@router.post("/api/subscriptions/checkout")
async def create_checkout_session(
    request: CheckoutRequest,
    service: SubscriptionService = Depends(get_subscription_service),
    user: UserORM = Depends(get_current_user)
):
    """Start a Stripe Checkout session and return its redirect URL."""
    if request.userId and request.userId != user.id:
        raise HTTPException(status_code=403, detail="Cannot start checkout for another user")
    return service.create_checkout_session(request.priceId, user.id)


@router.post("/api/subscriptions/cancel")
async def cancel_subscription(
    service: SubscriptionService = Depends(get_subscription_service),
    user: UserORM = Depends(get_current_user)
):
    return service.update_subscription(user.id, "free", "canceled")


@router.post("/webhook/stripe")
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="Stripe-Signature"),
    service: SubscriptionService = Depends(get_subscription_service)
):
    """Handle Stripe webhook events."""
    payload = await request.body()

    return service.handle_webhook(payload, stripe_signature)
