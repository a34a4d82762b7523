"""Database models."""

from app.models.appointments import appointments
from app.models.doctors import doctors
from app.models.notifications import notifications
from app.models.patients import patients
from app.models.users import users

__all__ = [
    "appointments",
    "doctors",
    "notifications",
    "patients",
    "users",
]
