"""Tests for booking through the schedule_appointment function."""

from datetime import date

import pytest
from sqlalchemy.exc import DBAPIError, OperationalError

from app.core.exceptions import (
    BadRequestException,
    InternalServerException,
    NotFoundException,
    ProcedureError,
)
from app.database import to_procedure_error
from app.schemas.appointments import AppointmentCreate
from app.schemas.auth import AuthContext, Role
from app.services.scheduling_service import (
    GUARD_ERROR_CODES,
    SchedulingService,
    classify_procedure_error,
)


class FakeDriverError(Exception):
    """Driver exception as wrapped by SQLAlchemy's asyncpg adapter."""

    def __init__(self, message: str, pgcode: str | None = None):
        super().__init__(message)
        self.pgcode = pgcode


class FakeAsyncpgError(Exception):
    """The asyncpg exception kept as the adapter error's cause."""

    def __init__(self, message: str, sqlstate: str):
        super().__init__(message)
        self.message = message
        self.sqlstate = sqlstate


def db_error(message: str, sqlstate: str | None) -> DBAPIError:
    return DBAPIError("SELECT schedule_appointment(...)", None, FakeDriverError(message, sqlstate))


def guard_error(message: str, sqlstate: str) -> DBAPIError:
    orig = FakeDriverError(f"<class 'asyncpg.exceptions.RaiseError'>: {message}")
    orig.__cause__ = FakeAsyncpgError(message, sqlstate)
    return DBAPIError("SELECT schedule_appointment(...)", None, orig)


@pytest.fixture
def patient() -> AuthContext:
    return AuthContext(user_id=11, role=Role.PATIENT)


@pytest.fixture
def booking() -> AppointmentCreate:
    return AppointmentCreate(doctor_id=5, date="2025-09-02", time="12:00")


def test_guard_codes_are_the_six_application_codes() -> None:
    """The booking function reports business rules with 50001-50006."""
    assert GUARD_ERROR_CODES == {50001, 50002, 50003, 50004, 50005, 50006}


@pytest.mark.parametrize("code", sorted(GUARD_ERROR_CODES))
def test_guard_rejection_is_a_bad_request(code: int) -> None:
    """Guard rejections keep the server message."""
    mapped = classify_procedure_error(ProcedureError(code, "This slot is already booked"))
    assert isinstance(mapped, BadRequestException)
    assert mapped.message == "This slot is already booked"


def test_foreign_key_violation_is_a_bad_request() -> None:
    """An unknown doctor is a client error, never an internal one."""
    mapped = classify_procedure_error(ProcedureError(23503, "violates foreign key constraint"))
    assert isinstance(mapped, BadRequestException)
    assert mapped.status_code == 400


@pytest.mark.parametrize("code", [None, 40001, 23505, 50000, 50007])
def test_other_errors_are_internal(code: int | None) -> None:
    """Everything else hides the driver message behind a generic error."""
    mapped = classify_procedure_error(ProcedureError(code, "deadlock detected"))
    assert isinstance(mapped, InternalServerException)
    assert mapped.message == "Failed to book appointment"


def test_to_procedure_error_prefers_asyncpg_cause() -> None:
    """The raw server message is taken from the asyncpg exception."""
    error = to_procedure_error(guard_error("Doctor is not available on Sunday", "50002"))
    assert error.code == 50002
    assert error.message == "Doctor is not available on Sunday"


def test_to_procedure_error_falls_back_to_pgcode() -> None:
    """Adapters without a cause still expose pgcode."""
    error = to_procedure_error(db_error("insert violates foreign key", "23503"))
    assert error.code == 23503
    assert error.message == "insert violates foreign key"


def test_to_procedure_error_non_numeric_sqlstate() -> None:
    """Non-numeric SQLSTATEs have no code."""
    error = to_procedure_error(db_error("internal error", "XX000"))
    assert error.code is None


@pytest.mark.asyncio
async def test_schedule_books_and_records_confirmation(
    mock_db, notifier, make_result, sample_details, patient, booking
) -> None:
    """Book doctor 5 on 2025-09-02 12:00 as patient 7; a Sent confirmation is logged."""
    mock_db.execute.side_effect = [
        make_result(scalar=7),  # patient lookup
        make_result(scalar=101),  # schedule_appointment
        make_result(rows=[sample_details(101)]),  # confirmation details
        make_result(),  # notification insert
    ]

    service = SchedulingService(mock_db, notifier)
    appointment_id = await service.schedule(patient, booking)

    assert appointment_id == 101

    procedure_call = mock_db.execute.await_args_list[1]
    assert "schedule_appointment" in str(procedure_call.args[0])
    assert procedure_call.args[1] == {
        "patient_id": 7,
        "doctor_id": 5,
        "appointment_date": date(2025, 9, 2),
        "appointment_time": "12:00:00",
    }

    notifier.send.assert_awaited_once()
    to, subject, html = notifier.send.await_args.args
    assert to == "asha@example.com"
    assert subject == "Appointment Confirmed with Dr. Vikram Mehta"
    assert "2 Sep 2025, 12:00 PM IST" in html

    insert_params = mock_db.execute.await_args_list[3].args[0].compile().params
    assert insert_params["appointment_id"] == 101
    assert insert_params["status"] == "Sent"
    assert insert_params["notification_type"] == "confirmation"
    assert insert_params["sent_at"] is not None

    # booking commit + notification commit
    assert mock_db.commit.await_count == 2


@pytest.mark.asyncio
async def test_failed_confirmation_is_recorded_as_failed(
    mock_db, notifier, make_result, sample_details, patient, booking
) -> None:
    """A failed email leaves a Failed row with no sent_at."""
    notifier.send.return_value = False
    mock_db.execute.side_effect = [
        make_result(scalar=7),
        make_result(scalar=101),
        make_result(rows=[sample_details(101)]),
        make_result(),
    ]

    appointment_id = await SchedulingService(mock_db, notifier).schedule(patient, booking)

    assert appointment_id == 101
    insert_params = mock_db.execute.await_args_list[3].args[0].compile().params
    assert insert_params["status"] == "Failed"
    assert insert_params["sent_at"] is None


@pytest.mark.asyncio
async def test_notification_logging_failure_does_not_fail_booking(
    mock_db, notifier, make_result, sample_details, patient, booking
) -> None:
    """The booking stands even if the notification row cannot be written."""
    mock_db.execute.side_effect = [
        make_result(scalar=7),
        make_result(scalar=101),
        make_result(rows=[sample_details(101)]),
        OperationalError("INSERT INTO notifications", None, Exception("connection lost")),
    ]

    appointment_id = await SchedulingService(mock_db, notifier).schedule(patient, booking)

    assert appointment_id == 101
    mock_db.rollback.assert_awaited()


@pytest.mark.asyncio
async def test_schedule_without_patient_profile(mock_db, notifier, make_result, patient, booking) -> None:
    """A user without a patient profile cannot book; the procedure is not called."""
    mock_db.execute.side_effect = [make_result(scalar=None)]

    with pytest.raises(NotFoundException):
        await SchedulingService(mock_db, notifier).schedule(patient, booking)

    assert mock_db.execute.await_count == 1
    mock_db.commit.assert_not_awaited()
    notifier.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_schedule_unknown_doctor(mock_db, notifier, make_result, patient, booking) -> None:
    """An FK violation from the procedure is a 400, and the transaction is rolled back."""
    mock_db.execute.side_effect = [
        make_result(scalar=7),
        db_error('insert on table "appointments" violates foreign key constraint', "23503"),
    ]

    with pytest.raises(BadRequestException) as exc_info:
        await SchedulingService(mock_db, notifier).schedule(patient, booking)

    assert "foreign key" in exc_info.value.message
    mock_db.rollback.assert_awaited_once()
    mock_db.commit.assert_not_awaited()
    notifier.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_schedule_guard_rejection_message_is_verbatim(
    mock_db, notifier, make_result, patient, booking
) -> None:
    """Guard messages reach the caller unchanged."""
    mock_db.execute.side_effect = [
        make_result(scalar=7),
        guard_error("This slot is already booked", "50005"),
    ]

    with pytest.raises(BadRequestException) as exc_info:
        await SchedulingService(mock_db, notifier).schedule(patient, booking)

    assert exc_info.value.message == "This slot is already booked"


@pytest.mark.asyncio
async def test_schedule_unexpected_database_error(mock_db, notifier, make_result, patient, booking) -> None:
    """Unclassified errors become a generic internal error."""
    mock_db.execute.side_effect = [
        make_result(scalar=7),
        db_error("could not serialize access", "40001"),
    ]

    with pytest.raises(InternalServerException):
        await SchedulingService(mock_db, notifier).schedule(patient, booking)

    mock_db.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_schedule_without_returned_id(mock_db, notifier, make_result, patient, booking) -> None:
    """A procedure that returns no id breaks its contract."""
    mock_db.execute.side_effect = [make_result(scalar=7), make_result(scalar=None)]

    with pytest.raises(InternalServerException):
        await SchedulingService(mock_db, notifier).schedule(patient, booking)

    mock_db.commit.assert_not_awaited()
    mock_db.rollback.assert_awaited_once()
    notifier.send.assert_not_awaited()
