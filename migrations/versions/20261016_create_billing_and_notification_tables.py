"""Create contacts/units/contracts/payments and notification tables

Revision ID: 20261016_create_billing_and_notification_tables
Revises:
Create Date: 2026-10-16 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261016_create_billing_and_notification_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Entidades do CRUD externo (espelho de leitura)
    op.create_table(
        "contacts",
        sa.Column("id", sa.String, primary_key=True),
        sa.Column("full_name", sa.String(150), nullable=False),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("email", sa.String(150), nullable=True),
        sa.Column("preferred_language", sa.String(5), nullable=False, server_default="en"),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )

    op.create_table(
        "units",
        sa.Column("id", sa.String, primary_key=True),
        sa.Column("unit_number", sa.String(30), nullable=False),
        sa.Column("building_name", sa.String(150), nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )

    op.create_table(
        "contracts",
        sa.Column("id", sa.String, primary_key=True),
        sa.Column("unit_id", sa.String, sa.ForeignKey("units.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("contact_id", sa.String, sa.ForeignKey("contacts.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("rent_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("payment_frequency", sa.String(20), nullable=False, server_default="monthly"),
        sa.Column("security_deposit", sa.Numeric(14, 2), nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.CheckConstraint("start_date <= end_date", name="ck_contracts_periodo_valido"),
    )

    # Parcelas geradas pelo cronograma
    op.create_table(
        "payments",
        sa.Column("id", sa.String, primary_key=True),
        sa.Column("contract_id", sa.String, sa.ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("due_date", sa.Date, nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("paid_date", sa.Date, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )
    op.create_index("idx_payments_status_due_date", "payments", ["status", "due_date"])

    # Notificações
    op.create_table(
        "notifications",
        sa.Column("id", sa.String, primary_key=True),
        sa.Column("type", sa.String, nullable=False, index=True),
        sa.Column("channel", sa.String, nullable=False, index=True),
        sa.Column("status", sa.String, nullable=False, server_default="pending", index=True),
        sa.Column("recipient_id", sa.String, nullable=False, index=True),
        sa.Column("recipient_phone", sa.String, nullable=True),
        sa.Column("recipient_email", sa.String, nullable=True),
        sa.Column("recipient_name", sa.String, nullable=True),
        sa.Column("subject", sa.String, nullable=True),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("template_id", sa.String, nullable=True),
        sa.Column("template_data", sa.JSON, nullable=True),
        sa.Column("metadata", sa.JSON, nullable=True),
        sa.Column("dedup_key", sa.String, nullable=True),
        sa.Column("scheduled_for", sa.DateTime, nullable=True),
        sa.Column("sent_at", sa.DateTime, nullable=True),
        sa.Column("delivered_at", sa.DateTime, nullable=True),
        sa.Column("read_at", sa.DateTime, nullable=True),
        sa.Column("failed_at", sa.DateTime, nullable=True),
        sa.Column("failure_reason", sa.Text, nullable=True),
        sa.Column("retry_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("external_message_id", sa.String, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
        sa.UniqueConstraint("type", "dedup_key", name="uq_notifications_type_dedup_key"),
    )
    op.create_index("idx_notifications_status_scheduled_for", "notifications", ["status", "scheduled_for"])

    op.create_table(
        "notification_logs",
        sa.Column("id", sa.String, primary_key=True),
        sa.Column("notification_id", sa.String, sa.ForeignKey("notifications.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("status", sa.String, nullable=False),
        sa.Column("message", sa.Text, nullable=True),
        sa.Column("error_details", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=True),
    )

    op.create_table(
        "notification_preferences",
        sa.Column("id", sa.String, primary_key=True),
        sa.Column("recipient_id", sa.String, nullable=False, unique=True, index=True),
        sa.Column("whatsapp_enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("email_enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("sms_enabled", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("in_app_enabled", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("payment_reminders", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("contract_alerts", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("maintenance_updates", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("announcements", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("preferred_language", sa.String(5), nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=True),
        sa.Column("updated_at", sa.DateTime, nullable=True),
    )

    op.create_table(
        "scheduler_job_runs",
        sa.Column("id", sa.String, primary_key=True),
        sa.Column("job", sa.String, nullable=False, index=True),
        sa.Column("trigger", sa.String, nullable=False, server_default="scheduled"),
        sa.Column("status", sa.String, nullable=False, server_default="running"),
        sa.Column("processed", sa.Integer, nullable=False, server_default="0"),
        sa.Column("sent", sa.Integer, nullable=False, server_default="0"),
        sa.Column("error", sa.Text, nullable=True),
        sa.Column("started_at", sa.DateTime, nullable=False),
        sa.Column("finished_at", sa.DateTime, nullable=True),
    )


def downgrade() -> None:
    op.drop_table("scheduler_job_runs")
    op.drop_table("notification_preferences")
    op.drop_table("notification_logs")
    op.drop_index("idx_notifications_status_scheduled_for", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("idx_payments_status_due_date", table_name="payments")
    op.drop_table("payments")
    op.drop_table("contracts")
    op.drop_table("units")
    op.drop_table("contacts")
