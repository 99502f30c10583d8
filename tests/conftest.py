from types import SimpleNamespace

import pytest
from flask_jwt_extended import create_access_token

from laundrygo import create_app
from laundrygo.config import TestConfig
from laundrygo.extensions import db as _db
from laundrygo.model import Branch, BranchAssignment, Detergent, Service, User
from laundrygo.services.activity_logger import ActivityLogger
from laundrygo.services.order_service import OrderLifecycleService


class RecordingGateway:
    """Keeps every draft it is asked to send."""

    def __init__(self):
        self.sent = []

    def send(self, draft):
        self.sent.append(draft)
        return True

    @property
    def titles(self):
        return [d.title for d in self.sent]


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        _db.drop_all()
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def seed(app):
    branch = Branch(name="Main Street", address="12 Rizal Ave")
    other = Branch(name="Uptown", address="99 Katipunan")
    _db.session.add_all([branch, other])
    _db.session.flush()

    wash = Service(branch_id=branch.id, name="Wash & Fold", price_per_kg=30)
    dry = Service(branch_id=branch.id, name="Dry Clean", price_per_kg=55)
    foreign = Service(branch_id=other.id, name="Wash & Fold", price_per_kg=28)
    detergent = Detergent(branch_id=branch.id, name="Ariel", kind="detergent")
    softener = Detergent(branch_id=branch.id, name="Downy", kind="softener")

    employee = User(email="ana@shop.test", name="Ana", role="employee")
    outsider = User(email="ben@shop.test", name="Ben", role="employee")
    customer = User(email="carla@mail.test", name="Carla", phone="0917", role="customer")
    _db.session.add_all([wash, dry, foreign, detergent, softener, employee, outsider, customer])
    _db.session.flush()

    _db.session.add(BranchAssignment(user_id=employee.id, branch_id=branch.id, role_in_shop="employee"))
    _db.session.add(BranchAssignment(user_id=outsider.id, branch_id=other.id, role_in_shop="employee"))
    _db.session.commit()

    return SimpleNamespace(
        branch_id=branch.id,
        other_branch_id=other.id,
        service_id=wash.id,
        dry_service_id=dry.id,
        foreign_service_id=foreign.id,
        detergent_id=detergent.id,
        softener_id=softener.id,
        employee_id=employee.id,
        outsider_id=outsider.id,
        customer_id=customer.id,
    )


@pytest.fixture
def gateway():
    return RecordingGateway()


@pytest.fixture
def service(app, gateway):
    return OrderLifecycleService(_db.session, gateway, ActivityLogger(_db.session), history_limit=20)


@pytest.fixture
def make_order(service, seed):
    """Create an order through the service with sensible defaults."""
    def _make(method="dropoff", **overrides):
        payload = {
            "branch_id": seed.branch_id,
            "customer_id": seed.customer_id,
            "customer_name": "Carla",
            "customer_contact": "0917",
            "method": method,
            "service_id": seed.service_id,
        }
        if method != "dropoff":
            payload.update(delivery_address="7 Mabini St", delivery_lat=14.6, delivery_lng=121.0)
        payload.update(overrides)
        return service.create_manual_order(payload)
    return _make


def auth_headers(user_id):
    return {"Authorization": f"Bearer {create_access_token(identity=str(user_id))}"}


@pytest.fixture
def employee_headers(seed):
    return auth_headers(seed.employee_id)


@pytest.fixture
def outsider_headers(seed):
    return auth_headers(seed.outsider_id)


@pytest.fixture
def customer_headers(seed):
    return auth_headers(seed.customer_id)
