from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from pymongo.database import Database

import config
from database import get_db, parse_object_id
from logging_config import get_logger
from paypal import PRICES, PayPalClient, apply_capture, apply_coupon
from security import get_optional_user

logger = get_logger(__name__)
router = APIRouter(prefix="/paypal", tags=["payments"])

PaymentType = Literal["sponsor_submission", "boost_alternative", "ad_banner", "ad_card", "ad_popup"]


class CouponRequest(BaseModel):
    payment_type: PaymentType
    coupon_code: str


class CreateOrderRequest(BaseModel):
    payment_type: PaymentType
    submission_id: Optional[str] = None
    alternative_id: Optional[str] = None
    advertisement_id: Optional[str] = None
    project_name: Optional[str] = None
    coupon_code: Optional[str] = None


class CaptureRequest(BaseModel):
    order_id: str


def get_paypal_client():
    client = PayPalClient()
    try:
        yield client
    finally:
        client.close()


@router.get("/config")
def paypal_config(client: PayPalClient = Depends(get_paypal_client)):
    return {
        "client_id": client.client_id,
        "mode": config.PAYPAL_MODE,
        "configured": client.configured,
        "prices": PRICES,
    }


@router.post("/coupons/validate")
def validate_coupon(payload: CouponRequest):
    return apply_coupon(payload.payment_type, payload.coupon_code)


@router.post("/orders", status_code=201)
def create_order(
    payload: CreateOrderRequest,
    db: Database = Depends(get_db),
    client: PayPalClient = Depends(get_paypal_client),
    user=Depends(get_optional_user),
):
    if payload.payment_type.startswith("ad_"):
        target_id, collection = payload.advertisement_id, "advertisement"
    else:
        target_id, collection = payload.submission_id or payload.alternative_id, "alternative"
    if not target_id:
        raise HTTPException(status_code=400, detail=f"{collection} id is required for {payload.payment_type}")
    if not db[collection].find_one({"_id": parse_object_id(target_id, f"{collection} id")}, {"_id": 1}):
        raise HTTPException(status_code=404, detail=f"{collection.capitalize()} not found")

    metadata = payload.model_dump(exclude={"payment_type"}, exclude_none=True)
    if user:
        metadata["user_id"] = str(user["_id"])
    return client.create_order(payload.payment_type, metadata)


@router.post("/capture")
def capture_order(payload: CaptureRequest, db: Database = Depends(get_db), client: PayPalClient = Depends(get_paypal_client)):
    order = client.get_order(payload.order_id)
    if order["status"] == "COMPLETED":
        raise HTTPException(status_code=409, detail="Order has already been captured")
    if order["status"] != "APPROVED":
        raise HTTPException(status_code=400, detail=f"Order is not approved (status {order['status']})")

    capture = client.capture_order(payload.order_id)
    if not capture["success"]:
        raise HTTPException(status_code=400, detail=f"Payment capture failed with status {capture['status']}")

    target = apply_capture(db, capture)
    logger.info("payment_captured", order_id=payload.order_id, capture_id=capture["capture_id"], target=target["type"])
    return {
        "success": True,
        "capture_id": capture["capture_id"],
        "amount": capture["amount"],
        "currency": capture["currency"],
        "payer_email": capture["payer_email"],
        "applied_to": target,
    }
