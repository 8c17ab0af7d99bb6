"""
PayPal Orders v2 integration: pricing, coupons, order creation and capture,
and applying a completed capture to the purchased listing or advertisement.
"""

import base64
import json
import time
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import httpx
from pymongo.database import Database

import config
from database import parse_object_id, utcnow
from logging_config import get_logger

logger = get_logger(__name__)

SANDBOX_URL = "https://api-m.sandbox.paypal.com"
LIVE_URL = "https://api-m.paypal.com"
PROMOTION_DAYS = 7

PRICES: Dict[str, Dict[str, str]] = {
    "sponsor_submission": {
        "amount": "49.00",
        "currency": "USD",
        "description": "Sponsor Plan - Featured listing for 7 days + Newsletter feature + Instant approval",
    },
    "boost_alternative": {
        "amount": "49.00",
        "currency": "USD",
        "description": "Boost Alternative - Featured listing for 7 days + Newsletter feature",
    },
    "ad_banner": {
        "amount": "49.00",
        "currency": "USD",
        "description": "Banner Advertisement - 7 days visibility",
    },
    "ad_card": {
        "amount": "99.00",
        "currency": "USD",
        "description": "Card Advertisement - 7 days visibility in listings grid",
    },
    "ad_popup": {
        "amount": "99.00",
        "currency": "USD",
        "description": "Popup Advertisement - 7 days visibility",
    },
}

COUPON_CODES: Dict[str, Dict[str, Any]] = {
    "LAUNCH60": {
        "discount": 0.60,
        "description": "60% launch discount",
        "valid_for": ("sponsor_submission", "boost_alternative"),
    },
    "LISTEDDISCOUNT": {
        "discount": 0.60,
        "description": "60% discount for admin-listed projects",
        "valid_for": ("sponsor_submission", "boost_alternative"),
    },
}


class PayPalError(Exception):
    """Raised when PayPal is unconfigured or answers with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def apply_coupon(payment_type: str, coupon_code: Optional[str]) -> Dict[str, Any]:
    if payment_type not in PRICES:
        raise ValueError(f"Unknown payment type: {payment_type}")
    original = PRICES[payment_type]["amount"]
    invalid = {"valid": False, "original_amount": original, "discounted_amount": original, "discount": 0}

    coupon = COUPON_CODES.get((coupon_code or "").strip().upper())
    if not coupon:
        return invalid
    if coupon.get("valid_for") and payment_type not in coupon["valid_for"]:
        return invalid

    discounted = float(original) * (1 - coupon["discount"])
    return {
        "valid": True,
        "original_amount": original,
        "discounted_amount": f"{discounted:.2f}",
        "discount": coupon["discount"],
        "description": coupon["description"],
    }


def encode_reference(metadata: Dict[str, Any]) -> str:
    return base64.b64encode(json.dumps(metadata).encode("utf-8")).decode("ascii")


def decode_reference(reference_id: Optional[str]) -> Dict[str, Any]:
    if not reference_id:
        return {}
    try:
        return json.loads(base64.b64decode(reference_id).decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        logger.warning("paypal_reference_undecodable", reference_id=reference_id)
        return {}


class PayPalClient:
    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        mode: Optional[str] = None,
        session: Optional[httpx.Client] = None,
    ):
        self.client_id = client_id if client_id is not None else config.PAYPAL_CLIENT_ID
        self.client_secret = client_secret if client_secret is not None else config.PAYPAL_CLIENT_SECRET
        mode = mode or config.PAYPAL_MODE
        self.base_url = LIVE_URL if mode == "live" else SANDBOX_URL
        self._session = session or httpx.Client(timeout=20.0)

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def _check(self, response: httpx.Response, action: str) -> Dict[str, Any]:
        if not response.is_success:
            logger.error("paypal_request_failed", action=action, status=response.status_code, body=response.text[:500])
            raise PayPalError(f"Failed to {action}", status_code=response.status_code)
        return response.json()

    def get_access_token(self) -> str:
        if not self.configured:
            raise PayPalError("PayPal credentials not configured")
        response = self._session.post(
            f"{self.base_url}/v1/oauth2/token",
            auth=(self.client_id, self.client_secret),
            data={"grant_type": "client_credentials"},
        )
        return self._check(response, "get PayPal access token")["access_token"]

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.get_access_token()}", "Content-Type": "application/json"}

    def create_order(self, payment_type: str, metadata: Dict[str, Any]) -> Dict[str, str]:
        """Create a CAPTURE order; returns {"order_id", "approval_url", "amount"}."""
        if payment_type not in PRICES:
            raise ValueError(f"Unknown payment type: {payment_type}")
        price = PRICES[payment_type]

        amount = price["amount"]
        if metadata.get("coupon_code"):
            coupon = apply_coupon(payment_type, metadata["coupon_code"])
            if coupon["valid"]:
                amount = coupon["discounted_amount"]

        reference = {"type": payment_type, **metadata, "timestamp": int(time.time() * 1000)}
        custom_id = metadata.get("submission_id") or metadata.get("advertisement_id") or metadata.get("alternative_id") or ""
        body = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "reference_id": encode_reference(reference),
                    "description": price["description"],
                    "amount": {"currency_code": price["currency"], "value": amount},
                    "custom_id": custom_id,
                }
            ],
            "application_context": {
                "brand_name": "OPEN_SRC.ME",
                "landing_page": "NO_PREFERENCE",
                "shipping_preference": "NO_SHIPPING",
                "user_action": "PAY_NOW",
                "return_url": f"{config.APP_URL}/payment/success",
                "cancel_url": f"{config.APP_URL}/payment/cancel",
            },
        }
        response = self._session.post(f"{self.base_url}/v2/checkout/orders", json=body, headers=self._auth_headers())
        data = self._check(response, "create PayPal order")

        approval = next((link["href"] for link in data.get("links", []) if link.get("rel") == "approve"), None)
        if not approval:
            raise PayPalError("No approval URL in PayPal response")
        logger.info("paypal_order_created", order_id=data["id"], payment_type=payment_type, amount=amount)
        return {"order_id": data["id"], "approval_url": approval, "amount": amount}

    def capture_order(self, order_id: str) -> Dict[str, Any]:
        response = self._session.post(
            f"{self.base_url}/v2/checkout/orders/{order_id}/capture",
            headers=self._auth_headers(),
        )
        data = self._check(response, "capture PayPal payment")

        units = data.get("purchase_units") or [{}]
        captures = (units[0].get("payments") or {}).get("captures") or []
        if not captures:
            raise PayPalError("No capture data in PayPal response")
        capture = captures[0]
        payer = data.get("payer") or {}
        name = payer.get("name") or {}

        return {
            "success": capture.get("status") == "COMPLETED",
            "capture_id": capture["id"],
            "status": capture.get("status"),
            "amount": capture["amount"]["value"],
            "currency": capture["amount"]["currency_code"],
            "payer_email": payer.get("email_address"),
            "payer_name": f"{name.get('given_name', '')} {name.get('surname', '')}".strip(),
            "metadata": decode_reference(units[0].get("reference_id")),
        }

    def get_order(self, order_id: str) -> Dict[str, Any]:
        response = self._session.get(f"{self.base_url}/v2/checkout/orders/{order_id}", headers=self._auth_headers())
        data = self._check(response, "get PayPal order details")
        unit = (data.get("purchase_units") or [{}])[0]
        amount = unit.get("amount") or {}
        return {
            "id": data["id"],
            "status": data.get("status"),
            "amount": amount.get("value", "0"),
            "currency": amount.get("currency_code", "USD"),
        }

    def close(self) -> None:
        self._session.close()


def apply_capture(db: Database, capture: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Record a completed capture against what was paid for.

    Sponsor and boost payments promote the alternative; ad payments activate
    the advertisement. Both run for seven days from `now`.
    """
    now = now or utcnow()
    expires = now + timedelta(days=PROMOTION_DAYS)
    metadata = capture.get("metadata") or {}
    payment_type = metadata.get("type") or ""
    amount = float(capture.get("amount") or 0)

    if payment_type in ("sponsor_submission", "boost_alternative"):
        target = metadata.get("submission_id") or metadata.get("alternative_id")
        if target:
            db["alternative"].update_one(
                {"_id": parse_object_id(target, "alternative id")},
                {"$set": {
                    "submission_plan": "sponsor",
                    "sponsor_payment_id": capture["capture_id"],
                    "sponsor_payment_amount": amount,
                    "sponsor_paid_at": now,
                    "sponsor_priority_until": expires,
                    "sponsor_featured_until": expires,
                    "featured": True,
                    "approved": True,
                    "status": "approved",
                    "rejection_reason": None,
                    "rejected_at": None,
                    "newsletter_included": True,
                    "updated_at": now,
                }},
            )
            logger.info("sponsor_payment_applied", alternative_id=target, capture_id=capture["capture_id"])
            return {"type": "sponsor", "id": target}

    if payment_type.startswith("ad_"):
        target = metadata.get("advertisement_id")
        if target:
            db["advertisement"].update_one(
                {"_id": parse_object_id(target, "advertisement id")},
                {"$set": {
                    "payment_id": capture["capture_id"],
                    "paid_at": now,
                    "payment_amount": amount,
                    "expires_at": expires,
                    "is_active": True,
                    "updated_at": now,
                }},
            )
            logger.info("ad_payment_applied", advertisement_id=target, capture_id=capture["capture_id"])
            return {"type": "advertisement", "id": target}

    logger.warning("payment_target_unknown", payment_type=payment_type, capture_id=capture.get("capture_id"))
    return {"type": None, "id": None}
