"""Lookup of domain identities for authenticated users."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.doctors import doctors
from app.models.patients import patients
from app.schemas.auth import AuthContext, Role


class IdentityService:
    """Maps a user_id to the patient_id or doctor_id that the user owns."""

    @staticmethod
    async def get_patient_id(db: AsyncSession, user_id: int) -> int | None:
        """Get the patient_id for a user, or None if the user has no patient profile."""
        result = await db.execute(select(patients.c.patient_id).where(patients.c.user_id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_doctor_id(db: AsyncSession, user_id: int) -> int | None:
        """Get the doctor_id for a user, or None if the user has no doctor profile."""
        result = await db.execute(select(doctors.c.doctor_id).where(doctors.c.user_id == user_id))
        return result.scalar_one_or_none()

    @classmethod
    async def resolve(cls, db: AsyncSession, auth: AuthContext) -> int | None:
        """Get the caller's identity for their role."""
        if auth.role == Role.PATIENT:
            return await cls.get_patient_id(db, auth.user_id)
        return await cls.get_doctor_id(db, auth.user_id)
