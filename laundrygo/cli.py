# laundrygo/cli.py
import click
from flask_jwt_extended import create_access_token
from .extensions import db
from .model import Branch, BranchAssignment, Detergent, Service, User

@click.command("create-branch")
@click.option("--name", required=True)
@click.option("--address", default="")
def create_branch(name, address):
    b = Branch(name=name.strip(), address=address.strip() or None)
    db.session.add(b); db.session.commit()
    click.echo(f"Branch created: {b.id} {b.name}")

@click.command("add-service")
@click.option("--branch-id", type=int, required=True)
@click.option("--name", required=True)
@click.option("--price-per-kg", type=float, required=True)
def add_service(branch_id, name, price_per_kg):
    if not db.session.get(Branch, branch_id):
        click.echo("Branch not found"); return
    if price_per_kg <= 0:
        click.echo("price-per-kg must be > 0"); return
    s = Service(branch_id=branch_id, name=name.strip(), price_per_kg=price_per_kg)
    db.session.add(s); db.session.commit()
    click.echo(f"Service created: {s.id} {s.name} @ {price_per_kg:.2f}/kg")

@click.command("add-detergent")
@click.option("--branch-id", type=int, required=True)
@click.option("--name", required=True)
@click.option("--kind", type=click.Choice(["detergent", "softener"]), default="detergent")
def add_detergent(branch_id, name, kind):
    if not db.session.get(Branch, branch_id):
        click.echo("Branch not found"); return
    d = Detergent(branch_id=branch_id, name=name.strip(), kind=kind)
    db.session.add(d); db.session.commit()
    click.echo(f"{kind.capitalize()} created: {d.id} {d.name}")

@click.command("assign-employee")
@click.option("--email", required=True)
@click.option("--name", required=True)
@click.option("--branch-id", type=int, required=True)
@click.option("--role", type=click.Choice(["employee", "owner"]), default="employee")
def assign_employee(email, name, branch_id, role):
    email = email.strip().lower()
    if not db.session.get(Branch, branch_id):
        click.echo("Branch not found"); return
    u = User.query.filter_by(email=email).first()
    if not u:
        u = User(email=email, name=name, role=role)
        db.session.add(u); db.session.flush()
    link = BranchAssignment.query.filter_by(user_id=u.id, branch_id=branch_id).first()
    if link:
        link.role_in_shop = role
        link.is_active = True
    else:
        db.session.add(BranchAssignment(user_id=u.id, branch_id=branch_id, role_in_shop=role))
    db.session.commit()
    click.echo(f"{u.email} assigned to branch {branch_id} as {role}")

@click.command("issue-token")
@click.option("--email", required=True)
def issue_token(email):
    u = User.query.filter_by(email=email.strip().lower()).first()
    if not u:
        click.echo("User not found"); return
    click.echo(create_access_token(identity=str(u.id)))

def register_cli(app):
    for cmd in (create_branch, add_service, add_detergent, assign_employee, issue_token):
        app.cli.add_command(cmd)
