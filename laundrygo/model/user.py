# --- laundrygo/model/user.py ---

from ..extensions import db
from ..utils.api import utcnow

class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(180), nullable=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    phone = db.Column(db.String(50), nullable=True)
    role = db.Column(db.String(50), nullable=False, default="customer", index=True)  # customer, employee, owner

    assignments = db.relationship("BranchAssignment", backref="user", lazy="selectin")

    def as_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "phone": self.phone,
            "role": self.role
            }

class BranchAssignment(db.Model):
    """Links an employee or owner to the branch they may operate."""
    __tablename__ = "shop_user_assignments"
    __table_args__ = (db.UniqueConstraint("user_id", "branch_id", name="uq_assignment_user_branch"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    branch_id = db.Column(db.Integer, db.ForeignKey("shop_branches.id"), nullable=False, index=True)
    role_in_shop = db.Column(db.String(20), nullable=False, default="employee")  # employee, owner
    is_active = db.Column(db.Boolean, default=True, index=True)
    created_at = db.Column(db.DateTime, default=utcnow)
