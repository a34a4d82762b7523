"""Patient model definition using SQLAlchemy Core."""

from sqlalchemy import (
    Column,
    Date,
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

patients = Table(
    "patients",
    metadata,
    Column("patient_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    ),
    Column("date_of_birth", Date),
    Column("gender", String(20)),
    Column("address", Text),
    Column("emergency_contact", Text),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=text("NOW()")),
)
