"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from decimal import Decimal

from commerce.domain.exceptions import UniqueConstraintViolation
from commerce.domain.model.order import (
    Address,
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentInfo,
    PaymentMethod,
    PaymentStatus,
    ShippingInfo,
)
from commerce.domain.model.value_objects import Money, Quantity
from commerce.domain.repository.order_repository import OrderRepository
from commerce.infrastructure.persistence.json_file import JsonFile


class JsonOrderRepository(JsonFile, OrderRepository):

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        with self._lock:
            for raw in self._load_raw():
                if raw["id"] == order_id:
                    return self._to_domain(raw)
        return None

    def get_by_order_number(self, order_number: str) -> Order | None:
        with self._lock:
            for raw in self._load_raw():
                if raw["order_number"] == order_number:
                    return self._to_domain(raw)
        return None

    def add(self, order: Order) -> None:
        with self._lock:
            orders = self._load_raw()
            if any(o["order_number"] == order.order_number for o in orders):
                raise UniqueConstraintViolation(
                    f"Order number {order.order_number} already exists"
                )
            order.id = max((o["id"] for o in orders), default=0) + 1
            orders.append(self._to_raw(order))
            self._persist_raw(orders)

    def save_if_unchanged(
        self, order: Order, status: OrderStatus, payment_status: PaymentStatus
    ) -> bool:
        with self._lock:
            orders = self._load_raw()
            for i, raw in enumerate(orders):
                if raw["id"] == order.id:
                    if raw["status"] != status.value or raw["payment"]["status"] != payment_status.value:
                        return False
                    orders[i] = self._to_raw(order)
                    self._persist_raw(orders)
                    return True
        return False

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        payment = order.payment
        return {
            "id": order.id,
            "order_number": order.order_number,
            "user_id": order.user_id,
            "status": order.status.value,
            "currency": order.currency,
            "items": [
                {
                    "product_id": item.product_id,
                    "variant_id": item.variant_id,
                    "name": item.name,
                    "sku": item.sku,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                }
                for item in order.items
            ],
            "shipping_address": asdict(order.shipping_address),
            "billing_address": asdict(order.billing_address),
            "payment": {
                "method": payment.method.value,
                "status": payment.status.value,
                "transaction_id": payment.transaction_id,
                "paid_at": _stamp(payment.paid_at),
                "refunded_at": _stamp(payment.refunded_at),
                "refund_amount": (
                    str(payment.refund_amount.amount) if payment.refund_amount else None
                ),
            },
            "shipping": {
                "method": order.shipping.method,
                "cost": str(order.shipping.cost.amount),
                "estimated_days": order.shipping.estimated_days,
                "carrier": order.shipping.carrier,
                "tracking_url": order.shipping.tracking_url,
            },
            "tax": str(order.tax.amount),
            "discount": str(order.discount.amount),
            "notes": order.notes,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "delivered_at": _stamp(order.delivered_at),
            "cancelled_at": _stamp(order.cancelled_at),
            "refunded_at": _stamp(order.refunded_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        currency = raw.get("currency", "USD")

        def money(value: str) -> Money:
            return Money(Decimal(value), currency)

        items = [
            OrderLineItem(
                product_id=i["product_id"],
                variant_id=i.get("variant_id"),
                name=i["name"],
                sku=i["sku"],
                quantity=Quantity(i["quantity"]),
                unit_price=money(i["unit_price"]),
            )
            for i in raw["items"]
        ]
        p = raw["payment"]
        s = raw["shipping"]
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            user_id=raw["user_id"],
            items=items,
            shipping_address=Address(**raw["shipping_address"]),
            billing_address=Address(**raw["billing_address"]),
            payment=PaymentInfo(
                method=PaymentMethod(p["method"]),
                status=PaymentStatus(p["status"]),
                transaction_id=p.get("transaction_id"),
                paid_at=_parse(p.get("paid_at")),
                refunded_at=_parse(p.get("refunded_at")),
                refund_amount=money(p["refund_amount"]) if p.get("refund_amount") else None,
            ),
            shipping=ShippingInfo(
                method=s["method"],
                cost=money(s["cost"]),
                estimated_days=s["estimated_days"],
                carrier=s.get("carrier"),
                tracking_url=s.get("tracking_url"),
            ),
            tax=money(raw["tax"]),
            discount=money(raw["discount"]),
            currency=currency,
            status=OrderStatus(raw["status"]),
            notes=raw.get("notes"),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
            delivered_at=_parse(raw.get("delivered_at")),
            cancelled_at=_parse(raw.get("cancelled_at")),
            refunded_at=_parse(raw.get("refunded_at")),
        )


def _stamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
