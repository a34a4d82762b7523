"""Doctor model definition using SQLAlchemy Core."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    text,
)

metadata = MetaData()

doctors = Table(
    "doctors",
    metadata,
    Column("doctor_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    ),
    Column("specialization", String(200)),
    Column("experience_years", Integer),
    # Comma separated weekday abbreviations, e.g. "Mon,Wed,Fri"
    Column("available_days", Text),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=text("NOW()")),
)
