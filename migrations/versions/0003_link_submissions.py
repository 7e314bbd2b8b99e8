"""link submissions, one row per submission"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0003"
down_revision = "0002"
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "assignsubmission_link",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("submission_id", sa.Integer(), sa.ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("assignment_id", sa.Integer(), sa.ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False),
        sa.Column("link", sa.Text(), nullable=False, server_default=""),
        sa.UniqueConstraint("submission_id", name="uq_assignsubmission_link_submission"),
    )
    op.create_index("ix_assignsubmission_link_assignment_id", "assignsubmission_link", ["assignment_id"])

def downgrade():
    op.drop_index("ix_assignsubmission_link_assignment_id", table_name="assignsubmission_link")
    op.drop_table("assignsubmission_link")
