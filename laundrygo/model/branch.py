# --- laundrygo/model/branch.py ---
from ..extensions import db
from ..utils.money import to_float

class Branch(db.Model):
    __tablename__ = "shop_branches"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    address = db.Column(db.String(255))

    services = db.relationship("Service", backref="branch", lazy=True)
    detergents = db.relationship("Detergent", backref="branch", lazy=True)

    def as_dict(self):
        return {"id": self.id, "name": self.name, "address": self.address}

class Service(db.Model):
    __tablename__ = "shop_services"

    id = db.Column(db.Integer, primary_key=True)
    branch_id = db.Column(db.Integer, db.ForeignKey("shop_branches.id"), nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    price_per_kg = db.Column(db.Numeric(12, 2), nullable=False)
    is_active = db.Column(db.Boolean, default=True)

    def as_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "price_per_kg": to_float(self.price_per_kg),
        }

class Detergent(db.Model):
    __tablename__ = "shop_detergents"

    id = db.Column(db.Integer, primary_key=True)
    branch_id = db.Column(db.Integer, db.ForeignKey("shop_branches.id"), nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    kind = db.Column(db.String(16), nullable=False, default="detergent")  # "detergent" | "softener"
    is_active = db.Column(db.Boolean, default=True)

    def as_dict(self):
        return {"id": self.id, "name": self.name, "kind": self.kind}
