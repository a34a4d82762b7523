"""User model definition using SQLAlchemy Core."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    text,
)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("user_id", Integer, primary_key=True, autoincrement=True),
    Column("full_name", Text, nullable=False),
    Column("email", Text, nullable=False, unique=True, index=True),
    Column("password_hash", Text, nullable=False),
    Column("phone_number", String(20)),
    # 'Patient' or 'Provider'
    Column("user_role", String(20), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=text("NOW()")),
    CheckConstraint("user_role IN ('Patient', 'Provider')", name="users_role_check"),
)
