"""
Order workflow: pricing at checkout and status transitions.

Status values form a closed set and only the moves listed in TRANSITIONS are
accepted. Status writes are compare-and-set on the stored status, so of two
concurrent conflicting updates at most one is applied.
"""
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pymongo import ReturnDocument

from validation import InvalidInput, parse_object_id

logger = logging.getLogger(__name__)

TOTAL_TOLERANCE = 0.01


class OrderStatus(str, Enum):
    PENDING = "Pending"
    DISPATCHED = "Dispatched"
    OUT_FOR_DELIVERY = "Out for delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentMode(str, Enum):
    CARD = "CARD"
    COD = "COD"
    UPI = "UPI"


TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.DISPATCHED, OrderStatus.CANCELLED},
    OrderStatus.DISPATCHED: {OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED},
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


class InvalidTransition(Exception):
    """Requested status cannot be reached from the order's current status."""

    def __init__(self, current, target: OrderStatus):
        self.current = current
        self.target = target
        # current may be a raw string when the stored status is outside OrderStatus
        super().__init__(f"Cannot change order status from {getattr(current, 'value', current)} to {target.value}")


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return current == target or target in TRANSITIONS[current]


def sources_for(target: OrderStatus) -> List[str]:
    """Statuses from which `target` may be set, including target itself."""
    return [s.value for s in OrderStatus if can_transition(s, target)]


def unit_price(product: Dict[str, Any]) -> float:
    price = float(product.get("price", 0))
    discount = float(product.get("discountPercentage", 0) or 0)
    return round(price * (1 - discount / 100.0), 2)


def price_items(products_collection, items: List[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], float]:
    """Snapshot current catalog prices onto order lines and compute the total.

    Each item needs `product` and `quantity`; any client-supplied price is
    replaced with the discounted catalog price.
    """
    if not items:
        raise InvalidInput("An order needs at least one item")
    product_ids = [parse_object_id(i["product"], "product") for i in items]
    found = {p["_id"]: p for p in products_collection.find({"_id": {"$in": product_ids}})}

    priced = []
    total = 0.0
    for item, product_id in zip(items, product_ids):
        product = found.get(product_id)
        if product is None or product.get("isDeleted"):
            raise InvalidInput(f"Product {product_id} is not available")
        quantity = int(item["quantity"])
        price = unit_price(product)
        priced.append({"product": product_id, "quantity": quantity, "price": price})
        total += price * quantity
    return priced, round(total, 2)


def create_order(
    db,
    user_id,
    items: List[Dict[str, Any]],
    address: List[Dict[str, Any]],
    payment_mode: PaymentMode,
    total: Optional[float] = None,
) -> Dict[str, Any]:
    """Price and store a new order in Pending status. Returns the stored document."""
    priced, computed_total = price_items(db["product"], items)
    if total is not None and abs(float(total) - computed_total) > TOTAL_TOLERANCE:
        raise InvalidInput(f"Order total does not match item prices (expected {computed_total:.2f})")

    now = datetime.now(timezone.utc)
    doc = {
        "user": parse_object_id(user_id, "user"),
        "item": priced,
        "address": address,
        "total": computed_total,
        "paymentMode": PaymentMode(payment_mode).value,
        "status": OrderStatus.PENDING.value,
        "paymentStatus": "unpaid",
        "createdAt": now,
        "updatedAt": now,
    }
    doc["_id"] = db["order"].insert_one(doc).inserted_id
    logger.info("Order %s created for user %s, total %.2f", doc["_id"], doc["user"], computed_total)
    return doc


def update_status(db, order_id, status) -> Optional[Dict[str, Any]]:
    """Move an order to `status`.

    Returns the updated order, None when the order does not exist, and raises
    InvalidTransition when the stored status does not allow the move.
    """
    oid = parse_object_id(order_id, "order id")
    try:
        target = OrderStatus(status)
    except ValueError:
        raise InvalidInput(f"Unknown order status: {status!r}")

    updated = db["order"].find_one_and_update(
        {"_id": oid, "status": {"$in": sources_for(target)}},
        {"$set": {"status": target.value, "updatedAt": datetime.now(timezone.utc)}},
        return_document=ReturnDocument.AFTER,
    )
    if updated is not None:
        logger.info("Order %s status set to %s", oid, target.value)
        return updated

    current = db["order"].find_one({"_id": oid}, {"status": 1})
    if current is None:
        return None
    try:
        stored = OrderStatus(current["status"])
    except ValueError:
        logger.warning("Order %s has unknown stored status %r", oid, current["status"])
        stored = current["status"]
    raise InvalidTransition(stored, target)
