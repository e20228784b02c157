"""Initial AI accountant schema

Revision ID: 3f1c2a9d7e10
Revises:
Create Date: 2026-10-18 09:12:44.381205

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = '3f1c2a9d7e10'
down_revision = None
branch_labels = None
depends_on = None

account_type = postgresql.ENUM("asset", "liability", "equity", "revenue", "expense", name="account_type", create_type=False)
transaction_status = postgresql.ENUM("pending", "cleared", "reconciled", name="transaction_status", create_type=False)
budget_type = postgresql.ENUM("monthly", "quarterly", "yearly", name="budget_type", create_type=False)
customer_type = postgresql.ENUM("customer", "client", name="customer_type", create_type=False)
vendor_type = postgresql.ENUM("vendor", "supplier", name="vendor_type", create_type=False)
message_role = postgresql.ENUM("user", "assistant", name="message_role", create_type=False)

ENUMS = (account_type, transaction_status, budget_type, customer_type, vendor_type, message_role)
TABLES_WITH_UPDATED_AT = ("accounts", "customers", "vendors", "conversations", "transactions", "budgets")


def _id():
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True)


def _owner():
    return sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)


def _timestamps(with_updated_at=True):
    cols = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"))]
    if with_updated_at:
        cols.append(sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()")))
    return cols


def upgrade() -> None:
    # 1) Enum types
    bind = op.get_bind()
    for enum in ENUMS:
        enum.create(bind, checkfirst=True)

    # 2) Tables
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("company_name", sa.String(), nullable=True),
        *_timestamps(with_updated_at=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "accounts",
        _id(),
        _owner(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("code", sa.String(), nullable=True),
        sa.Column("account_type", account_type, nullable=False),
        sa.Column("parent_account_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "code", name="uq_accounts_user_code"),
    )

    op.create_table(
        "categories",
        _id(),
        _owner(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("color", sa.String(), nullable=True, server_default="#6366f1"),
        *_timestamps(with_updated_at=False),
        sa.UniqueConstraint("user_id", "name", name="uq_categories_user_name"),
    )

    for table, kind_column, kind_enum, default in (
        ("customers", "customer_type", customer_type, "customer"),
        ("vendors", "vendor_type", vendor_type, "vendor"),
    ):
        op.create_table(
            table,
            _id(),
            _owner(),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("email", sa.String(), nullable=True),
            sa.Column("phone", sa.String(), nullable=True),
            sa.Column("address", sa.Text(), nullable=True),
            sa.Column("company_name", sa.String(), nullable=True),
            sa.Column("tax_number", sa.String(), nullable=True),
            sa.Column("payment_terms", sa.Integer(), nullable=True, server_default="30"),
            sa.Column("credit_limit", sa.Numeric(15, 2), nullable=True, server_default="0"),
            sa.Column("balance", sa.Numeric(15, 2), nullable=True, server_default="0"),
            sa.Column(kind_column, kind_enum, nullable=False, server_default=default),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("notes", sa.Text(), nullable=True),
            *_timestamps(),
        )
        op.create_index(f"ix_{table}_user_active", table, ["user_id", "is_active"])

    op.create_table(
        "conversations",
        _id(),
        _owner(),
        sa.Column("title", sa.String(), nullable=False, server_default="New Conversation"),
        *_timestamps(),
    )

    op.create_table(
        "messages",
        _id(),
        sa.Column("conversation_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role", message_role, nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(with_updated_at=False),
    )

    op.create_table(
        "transactions",
        _id(),
        _owner(),
        sa.Column("conversation_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("conversations.id", ondelete="SET NULL"), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(15, 2), nullable=False),
        sa.Column("transaction_date", sa.Date(), nullable=False, server_default=sa.text("CURRENT_DATE")),
        sa.Column("account_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("accounts.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("category_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("categories.id", ondelete="SET NULL"), nullable=True),
        sa.Column("customer_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("customers.id", ondelete="SET NULL"), nullable=True),
        sa.Column("vendor_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("vendors.id", ondelete="SET NULL"), nullable=True),
        sa.Column("status", transaction_status, nullable=False, server_default="pending"),
        sa.Column("reference_number", sa.String(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "budgets",
        _id(),
        _owner(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("category_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("categories.id"), nullable=True),
        sa.Column("account_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("accounts.id"), nullable=True),
        sa.Column("budget_type", budget_type, nullable=False),
        sa.Column("amount", sa.Numeric(15, 2), nullable=False),
        sa.Column("spent_amount", sa.Numeric(15, 2), nullable=False, server_default="0"),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint("end_date >= start_date", name="ck_budgets_window"),
    )

    # 3) Indexes
    for table in ("accounts", "categories", "customers", "vendors", "conversations", "transactions", "budgets"):
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])
    op.create_index("ix_messages_conversation_id", "messages", ["conversation_id"])
    op.create_index("ix_transactions_transaction_date", "transactions", ["transaction_date"])
    op.create_index("ix_transactions_account_id", "transactions", ["account_id"])
    op.create_index("ix_transactions_category_id", "transactions", ["category_id"])
    op.create_index("ix_transactions_customer_id", "transactions", ["customer_id"])
    op.create_index("ix_transactions_vendor_id", "transactions", ["vendor_id"])
    op.create_index("ix_transactions_rollup", "transactions", ["user_id", "category_id", "transaction_date"])
    op.create_index("ix_budgets_category_id", "budgets", ["category_id"])

    # 4) Keep updated_at current on raw SQL writes as well as ORM writes
    op.execute("""
    CREATE OR REPLACE FUNCTION set_updated_at()
    RETURNS trigger
    LANGUAGE plpgsql
    AS $$
    BEGIN
      NEW.updated_at := now();
      RETURN NEW;
    END;
    $$;
    """)
    for table in TABLES_WITH_UPDATED_AT:
        op.execute(f"""
        CREATE TRIGGER trg_{table}_updated_at
        BEFORE UPDATE ON {table}
        FOR EACH ROW
        EXECUTE FUNCTION set_updated_at();
        """)


def downgrade() -> None:
    for table in TABLES_WITH_UPDATED_AT:
        op.execute(f"DROP TRIGGER IF EXISTS trg_{table}_updated_at ON {table};")
    op.execute("DROP FUNCTION IF EXISTS set_updated_at();")

    for table in ("budgets", "transactions", "messages", "conversations", "vendors", "customers", "categories", "accounts", "users"):
        op.drop_table(table)

    bind = op.get_bind()
    for enum in reversed(ENUMS):
        enum.drop(bind, checkfirst=True)
