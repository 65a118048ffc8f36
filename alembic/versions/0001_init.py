from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
    ]


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=16), nullable=False, server_default="user"),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="active"),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "clients",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(length=50), nullable=False),
        sa.Column("last_name", sa.String(length=50), nullable=False),
        sa.Column("identification", sa.String(length=20), nullable=False),
        sa.Column("email", sa.String(length=100), nullable=False),
        sa.Column("phone", sa.String(length=15), nullable=False),
        sa.Column("address", sa.String(length=200), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("credit_score", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="ACTIVE"),
        *_timestamps(),
    )
    op.create_index("ix_clients_last_name", "clients", ["last_name"], unique=False)
    op.create_index("ix_clients_identification", "clients", ["identification"], unique=True)
    op.create_index("ix_clients_email", "clients", ["email"], unique=True)
    op.create_index("ix_clients_credit_score", "clients", ["credit_score"], unique=False)
    op.create_index("ix_clients_status", "clients", ["status"], unique=False)

    op.create_table(
        "loans",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("term_months", sa.Integer(), nullable=False),
        sa.Column("interest_rate", sa.Numeric(8, 4), nullable=False),
        sa.Column("loan_type", sa.String(length=16), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="PENDING"),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("amount > 0", name="ck_loans_amount_positive"),
        sa.CheckConstraint("term_months > 0", name="ck_loans_term_positive"),
    )
    op.create_index("ix_loans_client_id", "loans", ["client_id"], unique=False)
    op.create_index("ix_loans_loan_type", "loans", ["loan_type"], unique=False)
    op.create_index("ix_loans_status", "loans", ["status"], unique=False)

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("loan_id", sa.Integer(), sa.ForeignKey("loans.id", ondelete="CASCADE"), nullable=False),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("payment_method", sa.String(length=16), nullable=False, server_default="BANK_TRANSFER"),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="PENDING"),
        *_timestamps(),
    )
    op.create_index("ix_payments_loan_id", "payments", ["loan_id"], unique=False)
    op.create_index("ix_payments_client_id", "payments", ["client_id"], unique=False)
    op.create_index("ix_payments_payment_date", "payments", ["payment_date"], unique=False)
    op.create_index("ix_payments_status", "payments", ["status"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
    )
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"], unique=False)
    op.create_index("ix_audit_logs_username", "audit_logs", ["username"], unique=False)
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"], unique=False)
    op.create_index("ix_audit_logs_entity_type", "audit_logs", ["entity_type"], unique=False)
    op.create_index("ix_audit_logs_entity_id", "audit_logs", ["entity_id"], unique=False)
    op.create_index("ix_audit_logs_entity", "audit_logs", ["entity_type", "entity_id"], unique=False)

    op.create_table(
        "applications",
        sa.Column("sk_id_curr", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("target", sa.Integer(), nullable=True),
        sa.Column("contract_type", sa.String(length=50), nullable=True),
        sa.Column("gender", sa.String(length=10), nullable=True),
        sa.Column("own_car", sa.Integer(), nullable=True),
        sa.Column("own_realty", sa.Integer(), nullable=True),
        sa.Column("children", sa.Integer(), nullable=True),
        sa.Column("income_total", sa.Numeric(15, 2), nullable=True),
        sa.Column("credit_amount", sa.Numeric(15, 2), nullable=True),
        sa.Column("annuity", sa.Numeric(15, 2), nullable=True),
        sa.Column("goods_price", sa.Numeric(15, 2), nullable=True),
        sa.Column("occupation_type", sa.String(length=100), nullable=True),
        sa.Column("organization_type", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
    )
    op.create_index("ix_applications_contract_type", "applications", ["contract_type"], unique=False)
    op.create_index("ix_applications_created_at", "applications", ["created_at"], unique=False)

    op.create_table(
        "credit_history",
        sa.Column("sk_id_bureau", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("sk_id_curr", sa.Integer(), nullable=True),
        sa.Column("credit_active", sa.String(length=50), nullable=True),
        sa.Column("credit_type", sa.String(length=50), nullable=True),
        sa.Column("credit_sum", sa.Numeric(15, 2), nullable=True),
        sa.Column("credit_sum_debt", sa.Numeric(15, 2), nullable=True),
        sa.Column("credit_sum_limit", sa.Numeric(15, 2), nullable=True),
        sa.Column("days_credit", sa.Integer(), nullable=True),
        sa.Column("credit_day_overdue", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=True),
    )
    op.create_index("ix_credit_history_sk_id_curr", "credit_history", ["sk_id_curr"], unique=False)


def downgrade():
    op.drop_index("ix_credit_history_sk_id_curr", table_name="credit_history")
    op.drop_table("credit_history")

    op.drop_index("ix_applications_created_at", table_name="applications")
    op.drop_index("ix_applications_contract_type", table_name="applications")
    op.drop_table("applications")

    for ix in ("entity", "entity_id", "entity_type", "action", "username", "created_at"):
        op.drop_index(f"ix_audit_logs_{ix}", table_name="audit_logs")
    op.drop_table("audit_logs")

    for ix in ("status", "payment_date", "client_id", "loan_id"):
        op.drop_index(f"ix_payments_{ix}", table_name="payments")
    op.drop_table("payments")

    for ix in ("status", "loan_type", "client_id"):
        op.drop_index(f"ix_loans_{ix}", table_name="loans")
    op.drop_table("loans")

    for ix in ("status", "credit_score", "email", "identification", "last_name"):
        op.drop_index(f"ix_clients_{ix}", table_name="clients")
    op.drop_table("clients")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
