from pydantic import BaseModel
from typing import List, Literal, Optional


class RevenueCatEvent(BaseModel):
    type: str
    app_user_id: str
    original_app_user_id: str
    product_id: str
    period_type: str
    purchased_at_ms: int
    expiration_at_ms: Optional[int] = None
    environment: Literal["SANDBOX", "PRODUCTION"]
    entitlement_id: Optional[str] = None
    entitlement_ids: Optional[List[str]] = None
    presented_offering_id: Optional[str] = None
    transaction_id: str
    original_transaction_id: str
    is_family_share: Optional[bool] = None
    country_code: Optional[str] = None
    app_id: str
    aliases: Optional[List[str]] = None


class RevenueCatWebhook(BaseModel):
    event: RevenueCatEvent
