"""
Webhooks for the in-app purchase provider (RevenueCat).
Handlers only log for now; subscription state is granted through
/admin/users/grant-premium until store purchases are persisted.
"""
import logging

from fastapi import APIRouter, Depends

from app.dependencies.auth import verify_revenuecat_authorization
from app.schemas.webhooks import RevenueCatEvent, RevenueCatWebhook

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/revenuecat", dependencies=[Depends(verify_revenuecat_authorization)])
async def revenuecat_webhook(payload: RevenueCatWebhook):
    """
    RevenueCat webhook. Register this URL in the RevenueCat dashboard:
    https://your-backend.com/webhooks/revenuecat

    Always answers {"success": true} once the envelope validates, so a handler
    bug never makes RevenueCat retry the same event forever.
    """
    event = payload.event
    logger.info("[RevenueCat Webhook] %s for user %s", event.type, event.app_user_id)

    try:
        dispatch_event(event)
    except Exception:
        logger.exception("[RevenueCat Webhook] Handler failed for %s (%s)", event.type, event.transaction_id)

    return {"success": True}


def dispatch_event(event: RevenueCatEvent) -> None:
    if event.type in ("INITIAL_PURCHASE", "RENEWAL"):
        _handle_subscription_activated(event)
    elif event.type == "CANCELLATION":
        _handle_subscription_cancelled(event)
    elif event.type == "EXPIRATION":
        _handle_subscription_expired(event)
    else:
        logger.info("[RevenueCat Webhook] Unhandled event type: %s", event.type)


def _handle_subscription_activated(event: RevenueCatEvent) -> None:
    """Purchase or renewal; access runs until expiration_at_ms."""
    logger.info(
        "[RevenueCat Webhook] User %s activated subscription: %s (env=%s, entitlements=%s, expires_ms=%s)",
        event.app_user_id,
        event.product_id,
        event.environment,
        event.entitlement_ids or ([event.entitlement_id] if event.entitlement_id else []),
        event.expiration_at_ms,
    )


def _handle_subscription_cancelled(event: RevenueCatEvent) -> None:
    """Auto-renew turned off; still active until expiration."""
    logger.info(
        "[RevenueCat Webhook] User %s cancelled subscription: %s",
        event.app_user_id,
        event.product_id,
    )


def _handle_subscription_expired(event: RevenueCatEvent) -> None:
    logger.info(
        "[RevenueCat Webhook] User %s subscription expired: %s",
        event.app_user_id,
        event.product_id,
    )
