# laundrygo/order/routes.py
from flask import current_app, g, jsonify, request
from ..extensions import db
from ..services.order_service import OrderLifecycleService
from ..utils.api import api_ok, api_error
from ..utils.decorators import authorize_branch, login_required
from . import bp

def ok(msg, data=None, status=200):
    r = jsonify(api_ok(msg, data)); r.status_code = status; return r
def err(msg, status=400, data=None):
    r = jsonify(api_error(msg, data)); r.status_code = status; return r

def _service():
    return OrderLifecycleService.from_app(current_app, db.session)

@bp.get("")
@login_required
def list_orders():
    """
    Query params:
      - branch_id (required)
    Returns the branch's pending, awaiting_pickup, ongoing and history queues.
    """
    branch_id = request.args.get("branch_id")
    if not branch_id:
        return err("Branch ID required", 400)
    authorize_branch(branch_id)

    queues = _service().list_branch_orders(branch_id)
    return ok("orders", {
        "pending": [o.as_api() for o in queues.pending],
        "awaiting_pickup": [o.as_api() for o in queues.awaiting_pickup],
        "ongoing": [i.as_api() for i in queues.ongoing],
        "history": [h.as_api() for h in queues.history],
    })

@bp.post("")
@login_required
def create_order():
    """
    Body: branch_id, customer_name, customer_contact, method, service_id,
    detergent_id?, softener_id?, delivery_address?, delivery_lat?, delivery_lng?,
    customer_id?
    """
    payload = request.get_json(silent=True) or {}
    if not payload.get("branch_id"):
        return err("branch_id is required", 422)
    authorize_branch(payload["branch_id"])

    order = _service().create_manual_order(payload, actor=g.user)
    resp = ok("order created", {"order": order.as_api()}, status=201)
    resp.headers["X-Order-Id"] = order.id
    return resp

@bp.post("/<order_id>/weight")
@login_required
def record_weight(order_id):
    """Body: weight (kg, > 0), service_id, price_per_unit (defaults to the service price)."""
    svc = _service()
    authorize_branch(svc.branch_of_order(order_id))

    payload = request.get_json(silent=True) or {}
    item = svc.record_weight(
        order_id,
        payload.get("weight"),
        service_id=payload.get("service_id"),
        price_per_unit=payload.get("price_per_unit"),
        actor=g.user,
    )
    return ok("order weighed", {"item": item.as_api()})

@bp.post("/items/<item_id>/advance")
@login_required
def advance_status(item_id):
    svc = _service()
    authorize_branch(svc.branch_of_item(item_id))

    result = svc.advance_status(item_id, actor=g.user)
    msg = "status updated" if result.changed else "status unchanged"
    return ok(msg, {"transition": result.as_api()})
