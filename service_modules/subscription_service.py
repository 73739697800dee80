"""
Subscription Service - plan table, Stripe Checkout and subscription webhooks.
"""
from .base import (
    HTTPException, logging, datetime,
    get_db_session, UserORM
)
import stripe
import os

# Configure Stripe
stripe.api_key = os.environ.get("STRIPE_SECRET_KEY")

logger = logging.getLogger("stheneco")

PLANS = [
    {
        "id": "free",
        "name": "Free",
        "price": 0,
        "priceId": None,
        "features": [
            "3 AI trainer conversations per month",
            "Basic workout library access",
            "Progress tracking",
            "Community support",
        ],
        "limitations": ["Limited video generation", "No custom personas", "Basic form analysis"],
    },
    {
        "id": "premium",
        "name": "Premium",
        "price": 19.99,
        "priceId": "price_premium_monthly",
        "popular": True,
        "features": [
            "Unlimited AI trainer conversations",
            "Full workout program library",
            "Advanced form analysis",
            "Custom trainer personas",
            "Video generation (5 per month)",
            "Priority support",
            "Mobile app access",
        ],
    },
    {
        "id": "pro",
        "name": "Pro",
        "price": 49.99,
        "priceId": "price_pro_monthly",
        "features": [
            "Everything in Premium",
            "Unlimited video generation",
            "Custom workout program creation",
            "White-label trainer dashboard",
            "API access",
            "Advanced analytics",
            "Custom branding",
            "Dedicated support",
        ],
    },
]

TIERS = tuple(p["id"] for p in PLANS)
PRICE_TIERS = {p["priceId"]: p["id"] for p in PLANS if p["priceId"]}
STATUSES = ("active", "canceled", "expired")

NOT_CONFIGURED_MESSAGE = "Payment processing is not fully configured. Please contact support."


# Check if Stripe is configured
def is_stripe_configured():
    """Check if Stripe API key is configured (not a placeholder)."""
    api_key = os.environ.get("STRIPE_SECRET_KEY")
    return bool(api_key) and not api_key.startswith("your_") and len(api_key) > 20


class SubscriptionService:
    """Service for subscription tiers and Stripe payments."""

    def get_plans(self) -> list:
        return [dict(p) for p in PLANS]

    def create_checkout_session(self, price_id: str, user_id: str) -> dict:
        tier = PRICE_TIERS.get(price_id)
        if not tier:
            raise HTTPException(status_code=400, detail="Unknown price")
        if not is_stripe_configured():
            logger.warning("Checkout requested but Stripe is not configured")
            raise HTTPException(status_code=503, detail=NOT_CONFIGURED_MESSAGE)

        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.id == user_id).first()
            if not user:
                raise HTTPException(status_code=404, detail="User not found")

            app_url = os.environ.get("APP_URL", "http://localhost:9007")
            params = {
                "mode": "subscription",
                "line_items": [{"price": price_id, "quantity": 1}],
                "success_url": f"{app_url}/dashboard?checkout=success",
                "cancel_url": f"{app_url}/subscription?checkout=canceled",
                "client_reference_id": user.id,
                "metadata": {"user_id": user.id, "tier": tier},
            }
            if user.stripe_customer_id:
                params["customer"] = user.stripe_customer_id
            else:
                params["customer_email"] = user.email

            session = stripe.checkout.Session.create(**params)
            logger.info(f"Created checkout session {session.id} for user {user_id} ({tier})")
            return {"url": session.url, "session_id": session.id}
        except stripe.StripeError as e:
            logger.error(f"Stripe error creating checkout session: {e}")
            raise HTTPException(status_code=400, detail=f"Stripe error: {str(e)}")
        finally:
            db.close()

    def update_subscription(self, user_id: str, tier: str, status: str, customer_id: str = None) -> dict:
        if tier not in TIERS:
            raise HTTPException(status_code=400, detail=f"Invalid tier. Must be one of: {', '.join(TIERS)}")
        if status not in STATUSES:
            raise HTTPException(status_code=400, detail=f"Invalid status. Must be one of: {', '.join(STATUSES)}")

        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.id == user_id).first()
            if not user:
                raise HTTPException(status_code=404, detail="User not found")

            user.subscription_tier = tier
            user.subscription_status = status
            if customer_id:
                user.stripe_customer_id = customer_id
            user.updated_at = datetime.utcnow().isoformat()
            db.commit()
            logger.info(f"Subscription for {user_id} set to {tier}/{status}")
            return {"status": "success", "subscription_tier": tier, "subscription_status": status}
        except HTTPException:
            raise
        except Exception as e:
            db.rollback()
            raise HTTPException(status_code=500, detail=f"Failed to update subscription: {str(e)}")
        finally:
            db.close()

    # --- WEBHOOKS ---

    def handle_webhook(self, payload: bytes, signature: str) -> dict:
        """Handle Stripe webhook events."""
        webhook_secret = os.environ.get("STRIPE_WEBHOOK_SECRET")

        try:
            event = stripe.Webhook.construct_event(
                payload, signature, webhook_secret
            )
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid payload")
        except stripe.SignatureVerificationError:
            raise HTTPException(status_code=400, detail="Invalid signature")

        if event.type == "checkout.session.completed":
            self._handle_checkout_completed(event.data.object)
        elif event.type == "customer.subscription.deleted":
            self._handle_subscription_deleted(event.data.object)

        return {"status": "success"}

    def _handle_checkout_completed(self, session):
        metadata = session.metadata or {}
        user_id = session.client_reference_id or metadata.get("user_id")
        tier = metadata.get("tier")
        if not user_id or tier not in TIERS:
            logger.warning(f"Checkout session {session.id} has no usable user or tier")
            return
        self.update_subscription(user_id, tier, "active", customer_id=session.customer)

    def _handle_subscription_deleted(self, stripe_sub):
        db = get_db_session()
        try:
            user = db.query(UserORM).filter(UserORM.stripe_customer_id == stripe_sub.customer).first()
            if user:
                user.subscription_tier = "free"
                user.subscription_status = "canceled"
                user.updated_at = datetime.utcnow().isoformat()
                db.commit()
                logger.info(f"Canceled subscription from webhook for user {user.id}")
        finally:
            db.close()


# Singleton instance
subscription_service = SubscriptionService()

def get_subscription_service() -> SubscriptionService:
    """Dependency injection helper."""
    return subscription_service
