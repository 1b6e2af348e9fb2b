"""Command-line interface for invoice numbering."""

import sys
from datetime import date

import click
from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

# Load environment variables
load_dotenv()

from .core.exceptions import NumberingError
from .core.security import create_access_token
from .database import SessionLocal, init_db
from .models import Department, ResetPeriod, Seller, User, UserRole
from .services import (
    BaseService,
    counter_service,
    invoice_number_service,
    scheme_service,
    template_parser,
)

CLI_ERRORS = (NumberingError, ValueError, SQLAlchemyError)

RESET_PERIOD_CHOICE = click.Choice([p.value for p in ResetPeriod], case_sensitive=False)
ISO_DATE = click.DateTime(formats=["%Y-%m-%d"])


def _fail(error) -> None:
    click.echo(f"❌ Error: {error}", err=True)
    sys.exit(1)


@click.group()
def cli():
    """Invoice numbering CLI."""
    pass


# Database commands
@cli.group()
def db():
    """Database management commands."""
    pass


@db.command()
def init():
    """Initialize the database (create tables or apply migrations)."""
    click.echo("Initializing database...")
    try:
        init_db()
        click.echo("✅ Database initialized successfully!")
    except Exception as e:
        _fail(e)


# Seller commands
@cli.group()
def seller():
    """Seller management commands."""
    pass


@seller.command("add")
@click.option("--name", prompt=True, help="Seller name")
@click.option("--tax-id", help="Tax identifier")
def add_seller(name, tax_id):
    """Register a seller."""
    session = SessionLocal()
    try:
        created = BaseService(Seller).create(session, {"name": name, "tax_id": tax_id})
        click.echo(f"✅ Seller created: {created.name} (id={created.id})")
    except CLI_ERRORS as e:
        _fail(e)
    finally:
        session.close()


# Department commands
@cli.group()
def department():
    """Department management commands."""
    pass


@department.command("add")
@click.option("--seller-id", type=int, required=True)
@click.option("--code", prompt=True, help="Short code used by {DEPT}")
@click.option("--name", prompt=True, help="Department name")
def add_department(seller_id, code, name):
    """Register a department of a seller."""
    session = SessionLocal()
    try:
        if session.get(Seller, seller_id) is None:
            _fail(f"Seller {seller_id} not found")
        created = BaseService(Department).create(
            session, {"seller_id": seller_id, "code": code, "name": name}
        )
        click.echo(f"✅ Department created: {created.code} - {created.name}")
    except CLI_ERRORS as e:
        _fail(e)
    finally:
        session.close()


# User commands
@cli.group()
def user():
    """User management commands."""
    pass


@user.command("add")
@click.option("--username", prompt=True)
@click.option("--email", prompt=True)
@click.option(
    "--role",
    type=click.Choice([r.value for r in UserRole], case_sensitive=False),
    default=UserRole.USER.value,
)
@click.option("--seller-id", type=int, help="Seller the user acts for")
def add_user(username, email, role, seller_id):
    """Create an API user and print a bearer token for it."""
    session = SessionLocal()
    try:
        created = BaseService(User).create(
            session,
            {
                "username": username,
                "email": email,
                "role": UserRole(role.upper()),
                "seller_id": seller_id,
            },
        )
        token = create_access_token(created.id, additional_claims={"role": created.role.value})
        click.echo(f"✅ User created: {created.username} ({created.role.value})")
        click.echo(f"   Token: {token}")
    except CLI_ERRORS as e:
        _fail(e)
    finally:
        session.close()


# Scheme commands
@cli.group()
def scheme():
    """Numbering scheme commands."""
    pass


@scheme.command("add")
@click.option("--seller-id", type=int, required=True)
@click.option("--template", prompt=True, help="e.g. INV-{YYYY}-{SEQ:5}")
@click.option("--reset-period", type=RESET_PERIOD_CHOICE, default="YEARLY")
@click.option("--effective-from", type=ISO_DATE, help="Defaults to today")
@click.option("--draft", is_flag=True, help="Save without activating")
def add_scheme(seller_id, template, reset_period, effective_from, draft):
    """Create a numbering scheme for a seller."""
    session = SessionLocal()
    try:
        created = scheme_service.create_scheme(
            session,
            seller_id=seller_id,
            template=template,
            reset_period=ResetPeriod(reset_period.upper()),
            effective_from=effective_from.date() if effective_from else date.today(),
            draft=draft,
        )
        click.echo(
            f"✅ Scheme v{created.version} saved as {created.status.value}: "
            f"{created.template} ({created.reset_period.description})"
        )
        click.echo(f"   Preview: {template_parser.preview(created.template)}")
    except CLI_ERRORS as e:
        _fail(e)
    finally:
        session.close()


@scheme.command("preview")
@click.argument("template")
def preview_scheme(template):
    """Render a template with sample values."""
    try:
        click.echo(template_parser.preview(template))
    except CLI_ERRORS as e:
        _fail(e)


# Counter commands
@cli.group()
def counters():
    """Invoice counter commands."""
    pass


@counters.command("seed")
@click.option("--seller-id", type=int, required=True)
@click.option("--reset-period", type=RESET_PERIOD_CHOICE, required=True)
@click.option("--issue-date", type=ISO_DATE, required=True, help="Any date in the bucket")
@click.option("--start-value", type=int, required=True, help="Last number already issued")
def seed_counter(seller_id, reset_period, issue_date, start_value):
    """Continue a sequence issued by a previous system."""
    session = SessionLocal()
    try:
        counter = counter_service.seed_counter(
            session,
            seller_id,
            ResetPeriod(reset_period.upper()),
            issue_date.date(),
            start_value,
        )
        click.echo(
            f"✅ Counter {counter.period_key} seeded at {counter.last_value}; "
            f"next number is {counter.last_value + 1}"
        )
    except CLI_ERRORS as e:
        _fail(e)
    finally:
        session.close()


@counters.command("audit")
@click.option("--seller-id", type=int, required=True)
def audit_counters(seller_id):
    """Compare counters with the issued invoices."""
    session = SessionLocal()
    try:
        rows = counter_service.audit_counters(session, seller_id)
        if not rows:
            click.echo("No counters found.")
            return

        click.echo(f"\nCounters of seller {seller_id}:\n")
        for row in rows:
            marker = "⚠️ " if row.has_drift else "   "
            click.echo(
                f"{marker}{row.period_key} ({row.reset_period.value}): "
                f"counter={row.last_value} expected={row.expected_value} "
                f"invoices={row.invoice_count} last={row.last_invoice_number or '-'}"
            )
    except CLI_ERRORS as e:
        _fail(e)
    finally:
        session.close()


# Issue command
@cli.command()
@click.option("--seller-id", type=int, required=True)
@click.option("--issue-date", type=ISO_DATE, help="Defaults to today")
@click.option("--department", "department_code", help="Department code")
def issue(seller_id, issue_date, department_code):
    """Issue the next invoice number."""
    session = SessionLocal()
    try:
        generated = invoice_number_service.issue(
            session,
            seller_id,
            issue_date.date() if issue_date else date.today(),
            department_code,
        )
        click.echo(generated.invoice_number)
    except CLI_ERRORS as e:
        _fail(e)
    finally:
        session.close()


if __name__ == "__main__":
    cli()
