"""file storage"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0004"
down_revision = "0003"
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "files",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("context_id", sa.Integer(), nullable=False),
        sa.Column("component", sa.String(100), nullable=False),
        sa.Column("filearea", sa.String(50), nullable=False),
        sa.Column("itemid", sa.Integer(), nullable=False),
        sa.Column("filepath", sa.String(255), nullable=False, server_default="/"),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("mimetype", sa.String(100), nullable=True),
        sa.Column("filesize", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("content", sa.LargeBinary(), nullable=False),
        sa.Column("pathnamehash", sa.String(40), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_files_area", "files", ["context_id", "component", "filearea", "itemid"])

def downgrade():
    op.drop_index("ix_files_area", table_name="files")
    op.drop_table("files")
