"""create_invoice_numbering_tables

Revision ID: 3c1e7a2b9d40
Revises:
Create Date: 2026-02-01

Sellers, departments, users, numbering schemes, per-period invoice
counters, the issued-number ledger and the audit log.
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3c1e7a2b9d40"
down_revision = None
branch_labels = None
depends_on = None

RESET_PERIODS = ("NEVER", "YEARLY", "MONTHLY", "DAILY")


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade():
    op.create_table(
        "sellers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("tax_id", sa.String(50), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_seller_active", "sellers", ["is_active"])

    op.create_table(
        "departments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("seller_id", sa.Integer(), sa.ForeignKey("sellers.id"), nullable=False),
        sa.Column("code", sa.String(10), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("seller_id", "code", name="uq_department_seller_code"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(50), nullable=False, unique=True),
        sa.Column("email", sa.String(100), nullable=False, unique=True),
        sa.Column("role", sa.Enum("ADMIN", "USER", name="userrole"), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("seller_id", sa.Integer(), sa.ForeignKey("sellers.id"), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_user_username", "users", ["username"])
    op.create_index("idx_user_role_active", "users", ["role", "active"])

    op.create_table(
        "numbering_schemes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("seller_id", sa.Integer(), sa.ForeignKey("sellers.id"), nullable=False),
        sa.Column("template", sa.String(64), nullable=False),
        sa.Column("reset_period", sa.Enum(*RESET_PERIODS, name="resetperiod"), nullable=False),
        sa.Column("effective_from", sa.Date(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("ACTIVE", "ARCHIVED", "DRAFT", name="schemestatus"),
            nullable=False,
        ),
        sa.Column("created_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint(
            "seller_id",
            "effective_from",
            "version",
            name="uq_scheme_seller_effective_version",
        ),
    )
    op.create_index(
        "idx_scheme_seller_effective", "numbering_schemes", ["seller_id", "effective_from"]
    )

    op.create_table(
        "invoice_counters",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("seller_id", sa.Integer(), sa.ForeignKey("sellers.id"), nullable=False),
        sa.Column(
            "reset_period",
            sa.Enum(*RESET_PERIODS, name="resetperiod"),
            nullable=False,
        ),
        sa.Column("period_key", sa.String(32), nullable=False),
        sa.Column("last_value", sa.Integer(), nullable=False),
        sa.Column("base_offset", sa.Integer(), nullable=False),
        sa.Column("last_invoice_number", sa.String(128), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("seller_id", "period_key", name="uq_invoice_counter_scope"),
    )
    op.create_index("idx_invoice_counter_seller", "invoice_counters", ["seller_id"])

    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("seller_id", sa.Integer(), sa.ForeignKey("sellers.id"), nullable=False),
        sa.Column(
            "scheme_id", sa.Integer(), sa.ForeignKey("numbering_schemes.id"), nullable=True
        ),
        sa.Column("department_code", sa.String(10), nullable=True),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column(
            "reset_period",
            sa.Enum(*RESET_PERIODS, name="resetperiod"),
            nullable=False,
        ),
        sa.Column("period_key", sa.String(32), nullable=False),
        sa.Column("sequence_number", sa.Integer(), nullable=False),
        sa.Column("invoice_number", sa.String(128), nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_invoice_seller_number", "invoices", ["seller_id", "invoice_number"])
    op.create_index("idx_invoice_seller_period", "invoices", ["seller_id", "period_key"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("table_name", sa.String(50), nullable=False),
        sa.Column("record_id", sa.Integer(), nullable=False),
        sa.Column(
            "action",
            sa.Enum("INSERT", "UPDATE", "ARCHIVE", name="auditaction"),
            nullable=False,
        ),
        sa.Column("old_values", sa.Text(), nullable=True),
        sa.Column("new_values", sa.Text(), nullable=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
    )
    op.create_index("idx_audit_table_record", "audit_logs", ["table_name", "record_id"])
    op.create_index("idx_audit_timestamp", "audit_logs", ["timestamp"])


def downgrade():
    op.drop_index("idx_audit_timestamp", "audit_logs")
    op.drop_index("idx_audit_table_record", "audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("idx_invoice_seller_period", "invoices")
    op.drop_index("idx_invoice_seller_number", "invoices")
    op.drop_table("invoices")
    op.drop_index("idx_invoice_counter_seller", "invoice_counters")
    op.drop_table("invoice_counters")
    op.drop_index("idx_scheme_seller_effective", "numbering_schemes")
    op.drop_table("numbering_schemes")
    op.drop_index("idx_user_role_active", "users")
    op.drop_index("idx_user_username", "users")
    op.drop_table("users")
    op.drop_table("departments")
    op.drop_index("idx_seller_active", "sellers")
    op.drop_table("sellers")
