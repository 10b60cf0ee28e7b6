"""create business intelligence tables"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "4c81e0a9d2f7"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
            server_onupdate=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_created_at", "users", ["created_at"])

    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=18), nullable=False, server_default="ACTIVE"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_employees_user_id_users", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id", name="pk_employees"),
    )
    op.create_index("ix_employees_created_at", "employees", ["created_at"])

    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("zip_code", sa.String(length=10), nullable=False),
        sa.Column("status", sa.String(length=9), nullable=False, server_default="ACTIVE"),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_customers_user_id_users", ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id", name="pk_customers"),
    )
    op.create_index("ix_customers_created_at", "customers", ["created_at"])
    op.create_index("ix_customers_status_zip_code", "customers", ["status", "zip_code"])

    op.create_table(
        "coverage_areas",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("zip_code", sa.String(length=10), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("travel_distance", sa.Float(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["employee_id"], ["employees.id"], name="fk_coverage_areas_employee_id_employees", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_coverage_areas"),
    )
    op.create_index("ix_coverage_areas_created_at", "coverage_areas", ["created_at"])
    op.create_index("ix_coverage_areas_active_zip_code", "coverage_areas", ["active", "zip_code"])

    op.create_table(
        "services",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(length=11), nullable=False, server_default="PENDING"),
        sa.Column("scheduled_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("potential_earnings", sa.Float(), nullable=False, server_default="0"),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("customer_feedback", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["customer_id"], ["customers.id"], name="fk_services_customer_id_customers", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["employee_id"], ["employees.id"], name="fk_services_employee_id_employees", ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_services"),
    )
    op.create_index("ix_services_created_at", "services", ["created_at"])
    op.create_index("ix_services_status_completed_date", "services", ["status", "completed_date"])
    op.create_index("ix_services_employee_id", "services", ["employee_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("customer_id", sa.Integer(), nullable=True),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("status", sa.String(length=9), nullable=False, server_default="PENDING"),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["customer_id"], ["customers.id"], name="fk_payments_customer_id_customers", ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_payments"),
    )
    op.create_index("ix_payments_created_at", "payments", ["created_at"])
    op.create_index("ix_payments_status_created_at", "payments", ["status", "created_at"])

    op.create_table(
        "business_reports",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=19), nullable=False),
        sa.Column("period_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("period_end", sa.DateTime(timezone=True), nullable=False),
        sa.Column("report_data", sa.JSON().with_variant(JSONB(), "postgresql"), nullable=False),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_business_reports"),
        sa.UniqueConstraint("type", "period_start", name="uq_business_reports_type_period"),
    )


def downgrade() -> None:
    op.drop_table("business_reports")
    op.drop_index("ix_payments_status_created_at", table_name="payments")
    op.drop_index("ix_payments_created_at", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_services_employee_id", table_name="services")
    op.drop_index("ix_services_status_completed_date", table_name="services")
    op.drop_index("ix_services_created_at", table_name="services")
    op.drop_table("services")
    op.drop_index("ix_coverage_areas_active_zip_code", table_name="coverage_areas")
    op.drop_index("ix_coverage_areas_created_at", table_name="coverage_areas")
    op.drop_table("coverage_areas")
    op.drop_index("ix_customers_status_zip_code", table_name="customers")
    op.drop_index("ix_customers_created_at", table_name="customers")
    op.drop_table("customers")
    op.drop_index("ix_employees_created_at", table_name="employees")
    op.drop_table("employees")
    op.drop_index("ix_users_created_at", table_name="users")
    op.drop_table("users")
