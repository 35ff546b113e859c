"""add vehicle bookings"""
from alembic import op
import sqlalchemy as sa

revision = "0002_vehicle_bookings"
down_revision = "0001_initial_schema"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "vehicle_bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("vehicle_id", sa.Integer(), sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("start_at", sa.DateTime(), nullable=False),
        sa.Column("end_at", sa.DateTime(), nullable=False),
        sa.Column("title", sa.String(120), nullable=True),
        sa.Column("requester_name", sa.String(120), nullable=True),
        sa.Column("requester_contact", sa.String(255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(32), nullable=False, server_default="PLANNED"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_vehicle_bookings_vehicle_id", "vehicle_bookings", ["vehicle_id"])


def downgrade() -> None:
    op.drop_index("ix_vehicle_bookings_vehicle_id", table_name="vehicle_bookings")
    op.drop_table("vehicle_bookings")
