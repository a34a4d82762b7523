"""Stored database functions shared by the migrations and the integration tests."""

# Guard rules raise SQLSTATE 50001-50006; the API returns their messages to
# the client as 400. An unknown doctor or patient trips the foreign keys
# (23503) on insert.
#
#   50001  appointment is in the past
#   50002  doctor does not work on that weekday
#   50003  outside clinic hours (09:00-17:00)
#   50004  not on a 30 minute slot boundary
#   50005  doctor already booked for that slot
#   50006  patient already has an appointment at that time
SCHEDULE_APPOINTMENT_FUNCTION = """
    CREATE OR REPLACE FUNCTION schedule_appointment(
        p_patient_id INTEGER,
        p_doctor_id INTEGER,
        p_appointment_date DATE,
        p_appointment_time VARCHAR
    )
    RETURNS INTEGER AS $$
    DECLARE
        v_at TIMESTAMP;
        v_time TIME;
        v_now TIMESTAMP;
        v_days TEXT;
        v_id INTEGER;
    BEGIN
        v_time := p_appointment_time::TIME;
        v_at := p_appointment_date + v_time;
        v_now := NOW() AT TIME ZONE COALESCE(
            NULLIF(current_setting('app.clinic_timezone', true), ''),
            'Asia/Kolkata'
        );

        IF v_at <= v_now THEN
            RAISE EXCEPTION 'Cannot book an appointment in the past'
                USING ERRCODE = '50001';
        END IF;

        SELECT available_days INTO v_days FROM doctors WHERE doctor_id = p_doctor_id;
        IF v_days IS NOT NULL AND v_days <> '' AND NOT (
            to_char(p_appointment_date, 'Dy')
                = ANY (string_to_array(replace(v_days, ' ', ''), ','))
        ) THEN
            RAISE EXCEPTION 'Doctor is not available on %', to_char(p_appointment_date, 'FMDay')
                USING ERRCODE = '50002';
        END IF;

        IF v_time < TIME '09:00' OR v_time >= TIME '17:00' THEN
            RAISE EXCEPTION 'Appointments are available between 09:00 and 17:00'
                USING ERRCODE = '50003';
        END IF;

        IF EXTRACT(MINUTE FROM v_time)::INTEGER % 30 <> 0
            OR EXTRACT(SECOND FROM v_time) <> 0 THEN
            RAISE EXCEPTION 'Appointments start on the hour or half hour'
                USING ERRCODE = '50004';
        END IF;

        -- Serialize bookings per doctor so the slot checks below see each other
        PERFORM pg_advisory_xact_lock(p_doctor_id);

        IF EXISTS (
            SELECT 1 FROM appointments
            WHERE doctor_id = p_doctor_id
              AND appointment_date = v_at
              AND status <> 'Cancelled'
        ) THEN
            RAISE EXCEPTION 'This slot is already booked'
                USING ERRCODE = '50005';
        END IF;

        IF EXISTS (
            SELECT 1 FROM appointments
            WHERE patient_id = p_patient_id
              AND appointment_date = v_at
              AND status <> 'Cancelled'
        ) THEN
            RAISE EXCEPTION 'You already have an appointment at this time'
                USING ERRCODE = '50006';
        END IF;

        INSERT INTO appointments (patient_id, doctor_id, appointment_date, status)
        VALUES (p_patient_id, p_doctor_id, v_at, 'Scheduled')
        RETURNING appointment_id INTO v_id;

        RETURN v_id;
    END;
    $$ LANGUAGE plpgsql;
"""

DROP_SCHEDULE_APPOINTMENT_FUNCTION = (
    "DROP FUNCTION IF EXISTS schedule_appointment(INTEGER, INTEGER, DATE, VARCHAR)"
)
