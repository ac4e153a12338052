"""SQLAlchemy table definitions - dialect-agnostic (works with SQLite and PostgreSQL)."""

from sqlalchemy import Column, DateTime, Index, Integer, MetaData, String, Table, Text
from sqlalchemy.types import JSON

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# RECORDS TABLE
# ============================================================================
records_table = Table(
    "records",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),  # Insertion order
    Column("id", String, nullable=False, unique=True),
    Column("fields", JSON, nullable=False),
    Column("owner", String, nullable=True),  # NULL = public record
    Column("asset_ref", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=True),
    Column("updated_at", DateTime(timezone=True), nullable=True),
)

Index("idx_records_owner", records_table.c.owner)
