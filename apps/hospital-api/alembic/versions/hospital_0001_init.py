"""hospital_0001_init

Create table:
- hospitals
"""

from alembic import op

revision = "hospital_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute(
        """
        CREATE TABLE IF NOT EXISTS hospitals (
          id SERIAL PRIMARY KEY,
          name VARCHAR(100) NOT NULL CHECK (length(trim(name)) > 0),
          type VARCHAR(64) NOT NULL,
          status VARCHAR(32) NOT NULL,
          lat NUMERIC(10, 7) NOT NULL CHECK (lat BETWEEN -90 AND 90),
          lng NUMERIC(11, 7) NOT NULL CHECK (lng BETWEEN -180 AND 180),
          created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
          updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
        """
    )
    op.execute("CREATE INDEX IF NOT EXISTS idx_hospitals_lat_lng ON hospitals (lat, lng)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_hospitals_type ON hospitals (type)")
    op.execute("CREATE INDEX IF NOT EXISTS ix_hospitals_status ON hospitals (status)")
    op.execute("CREATE INDEX IF NOT EXISTS idx_hospitals_created_at ON hospitals (created_at DESC)")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS hospitals")
