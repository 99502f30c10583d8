import uuid as _uuid
from ..extensions import db
from ..utils.api import utcnow
from ..utils.money import to_float

def _new_id():
    return str(_uuid.uuid4())

class Order(db.Model):
    """Intake record; lives until the order is archived to OrderHistory."""
    __tablename__ = "orders"

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    branch_id = db.Column(db.Integer, db.ForeignKey("shop_branches.id"), nullable=False, index=True)
    customer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)  # null for walk-ins
    method = db.Column(db.String(16), nullable=False, index=True)  # dropoff | pickup | delivery

    # Customer snapshot
    customer_name = db.Column(db.String(120), nullable=False)
    customer_contact = db.Column(db.String(50))
    delivery_address = db.Column(db.String(255))
    delivery_lat = db.Column(db.Float)
    delivery_lng = db.Column(db.Float)

    service_id = db.Column(db.Integer, db.ForeignKey("shop_services.id"), nullable=True)
    detergent_id = db.Column(db.Integer, db.ForeignKey("shop_detergents.id"), nullable=True)
    softener_id = db.Column(db.Integer, db.ForeignKey("shop_detergents.id"), nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow, index=True)

    item = db.relationship(
        "OrderItem",
        back_populates="order",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="joined",
    )
    service = db.relationship("Service", lazy="joined")
    detergent = db.relationship("Detergent", foreign_keys=[detergent_id], lazy="joined")
    softener = db.relationship("Detergent", foreign_keys=[softener_id], lazy="joined")

    @property
    def code(self):
        return f"Order #{self.id[:8].upper()}"

    def delivery_location(self):
        if self.delivery_lat is None and self.delivery_lng is None and not self.delivery_address:
            return None
        return {
            "address": self.delivery_address,
            "lat": self.delivery_lat,
            "lng": self.delivery_lng,
        }

    def as_api(self):
        return {
            "id": self.id,
            "code": self.code,
            "branch_id": self.branch_id,
            "method": self.method,
            "customer": {
                "id": self.customer_id,
                "name": self.customer_name,
                "contact": self.customer_contact,
            },
            "delivery_location": self.delivery_location(),
            "service": self.service.as_dict() if self.service else None,
            "detergent": self.detergent.as_dict() if self.detergent else None,
            "softener": self.softener.as_dict() if self.softener else None,
            "item": self.item.as_api(with_order=False) if self.item else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

class OrderItem(db.Model):
    """Active work record; at most one per order (unique order_id)."""
    __tablename__ = "order_items"

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    order_id = db.Column(
        db.String(36),
        db.ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    service_id = db.Column(db.Integer, db.ForeignKey("shop_services.id"), nullable=True)

    quantity = db.Column(db.Numeric(10, 2), nullable=True)  # kg; null on a pickup placeholder
    price_per_unit = db.Column(db.Numeric(12, 2), nullable=True)
    subtotal = db.Column(db.Numeric(12, 2), nullable=True)

    status = db.Column(db.String(24), nullable=False, index=True)
    started_at = db.Column(db.DateTime)
    completed_at = db.Column(db.DateTime)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    order = db.relationship("Order", back_populates="item")
    service = db.relationship("Service", lazy="joined")

    @property
    def weighed(self) -> bool:
        return self.quantity is not None

    def as_api(self, with_order=True):
        data = {
            "id": self.id,
            "order_id": self.order_id,
            "status": self.status,
            "service": self.service.as_dict() if self.service else None,
            "quantity": to_float(self.quantity),
            "price_per_unit": to_float(self.price_per_unit),
            "subtotal": to_float(self.subtotal),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
        if with_order and self.order is not None:
            data["order"] = {
                "id": self.order.id,
                "code": self.order.code,
                "method": self.order.method,
                "customer_name": self.order.customer_name,
                "customer_contact": self.order.customer_contact,
                "delivery_location": self.order.delivery_location(),
            }
        return data

class OrderHistory(db.Model):
    """Immutable archive snapshot, written once when an order completes."""
    __tablename__ = "order_history"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.String(36), unique=True, nullable=False, index=True)  # no FK: the order row is deleted
    branch_id = db.Column(db.Integer, nullable=False, index=True)
    customer_id = db.Column(db.Integer, nullable=True, index=True)

    customer_name = db.Column(db.String(120))
    customer_contact = db.Column(db.String(50))
    method = db.Column(db.String(16), nullable=False)
    method_label = db.Column(db.String(32))
    service_name = db.Column(db.String(120))
    detergent_name = db.Column(db.String(120))
    softener_name = db.Column(db.String(120))
    delivery_address = db.Column(db.String(255))

    weight = db.Column(db.Numeric(10, 2), nullable=False)
    price_per_unit = db.Column(db.Numeric(12, 2), nullable=False)
    price = db.Column(db.Numeric(12, 2), nullable=False)
    status = db.Column(db.String(24), nullable=False, default="completed")

    created_at = db.Column(db.DateTime)
    completed_at = db.Column(db.DateTime, nullable=False, index=True)

    def as_api(self):
        return {
            "id": self.id,
            "order_id": self.order_id,
            "branch_id": self.branch_id,
            "customer": {
                "id": self.customer_id,
                "name": self.customer_name,
                "contact": self.customer_contact,
            },
            "method": self.method,
            "method_label": self.method_label,
            "service_name": self.service_name,
            "detergent_name": self.detergent_name,
            "softener_name": self.softener_name,
            "delivery_address": self.delivery_address,
            "weight": to_float(self.weight),
            "price_per_unit": to_float(self.price_per_unit),
            "price": to_float(self.price),
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
