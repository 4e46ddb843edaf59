"""
Tests d'intégration API pour les séances et le marquage des présences.
"""

import uuid
from datetime import datetime
from unittest.mock import patch

from app.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from app.schemas.attendance import AttendanceResponse
from app.schemas.schedule import ScheduleResponse


def make_schedule_response(**kwargs) -> ScheduleResponse:
    student_ids = kwargs.get("student_ids", [])
    return ScheduleResponse(
        id=kwargs.get("id", uuid.uuid4()),
        class_id=kwargs.get("class_id", uuid.uuid4()),
        teacher_id=kwargs.get("teacher_id", uuid.uuid4()),
        date=kwargs.get("date", datetime(2026, 10, 18, 9, 30)),
        room=kwargs.get("room"),
        student_ids=student_ids,
        total_students=len(student_ids),
        created_at=datetime.now(),
        updated_at=datetime.now(),
    )


def schedule_body(**overrides):
    body = {
        "class_id": str(uuid.uuid4()),
        "teacher_id": str(uuid.uuid4()),
        "date": "2026-10-18T09:30:00",
        "room": "Salle 1",
    }
    body.update(overrides)
    return body


# ============================================================
# Séances
# ============================================================

def test_create_schedule_succes(client, as_admin):
    children = [uuid.uuid4(), uuid.uuid4()]
    with patch("app.routers.schedules.schedule_service.create_schedule") as mock:
        mock.return_value = make_schedule_response(student_ids=children)
        response = client.post("/api/v1/schedules", json=schedule_body())

    assert response.status_code == 201
    assert response.json()["total_students"] == 2
    assert response.json()["student_ids"] == [str(c) for c in children]


def test_create_schedule_par_un_enseignant(client, as_teacher):
    response = client.post("/api/v1/schedules", json=schedule_body())
    assert response.status_code == 403


def test_create_schedule_date_manquante(client, as_admin):
    body = schedule_body()
    del body["date"]
    response = client.post("/api/v1/schedules", json=body)
    assert response.status_code == 422


def test_create_schedule_salle_occupee(client, as_admin):
    with patch("app.routers.schedules.schedule_service.create_schedule") as mock:
        mock.side_effect = ConflictError("La salle 'Salle 1' est déjà réservée à cette date.")
        response = client.post("/api/v1/schedules", json=schedule_body())
    assert response.status_code == 409


def test_create_schedule_enseignant_indisponible(client, as_admin):
    with patch("app.routers.schedules.schedule_service.create_schedule") as mock:
        mock.side_effect = BadRequestError("L'enseignant n'est pas disponible le Sunday.")
        response = client.post("/api/v1/schedules", json=schedule_body())
    assert response.status_code == 400


def test_create_recurring_schedules(client, as_admin):
    with patch("app.routers.schedules.schedule_service.create_recurring_schedules") as mock:
        mock.return_value = [make_schedule_response() for _ in range(3)]
        response = client.post("/api/v1/schedules/recurring", json=schedule_body(
            recurrence={"frequency": "weekly", "count": 3},
        ))

    assert response.status_code == 201
    assert len(response.json()) == 3


def test_create_recurring_frequence_invalide(client, as_admin):
    response = client.post("/api/v1/schedules/recurring", json=schedule_body(
        recurrence={"frequency": "yearly", "count": 3},
    ))
    assert response.status_code == 422


def test_list_schedules_filtres(client, as_parent):
    class_id = uuid.uuid4()
    with patch("app.routers.schedules.schedule_service.get_schedules", return_value=[]) as mock:
        response = client.get(f"/api/v1/schedules?class_id={class_id}&start=2026-10-01T00:00:00")

    assert response.status_code == 200
    assert mock.call_args.kwargs["class_id"] == class_id
    assert mock.call_args.kwargs["start"] == datetime(2026, 10, 1)


def test_my_schedules(client, as_teacher):
    with patch("app.routers.schedules.schedule_service.get_teacher_schedules", return_value=[]) as mock:
        response = client.get("/api/v1/schedules/mine")
    assert response.status_code == 200
    assert mock.call_args.args[1] == as_teacher.id


def test_get_schedule_introuvable(client, as_teacher):
    with patch("app.routers.schedules.schedule_service.get_schedule", return_value=None):
        response = client.get(f"/api/v1/schedules/{uuid.uuid4()}")
    assert response.status_code == 404


def test_update_schedule_introuvable(client, as_admin):
    with patch("app.routers.schedules.schedule_service.update_schedule", return_value=None):
        response = client.put(f"/api/v1/schedules/{uuid.uuid4()}", json={"room": "Salle 2"})
    assert response.status_code == 404


def test_delete_schedule(client, as_admin):
    with patch("app.routers.schedules.schedule_service.delete_schedule", return_value=True):
        response = client.delete(f"/api/v1/schedules/{uuid.uuid4()}")
    assert response.status_code == 204


# ============================================================
# Présences
# ============================================================

def make_attendance_response(schedule_id, child_id, status="PRESENT") -> AttendanceResponse:
    return AttendanceResponse(
        id=uuid.uuid4(), schedule_id=schedule_id, child_id=child_id,
        child_first_name="Léa", child_last_name="Dupont", status=status, notes=None,
        marked_by=uuid.uuid4(), marked_by_name="Mme Martin", created_at=datetime.now(),
    )


def test_mark_attendance_succes(client, as_teacher):
    schedule_id, child_id = uuid.uuid4(), uuid.uuid4()
    with patch("app.routers.schedules.attendance_service.mark_attendance") as mock:
        mock.return_value = [make_attendance_response(schedule_id, child_id)]
        response = client.post(f"/api/v1/schedules/{schedule_id}/attendance", json={
            "records": [{"child_id": str(child_id), "status": "present"}],
        })

    assert response.status_code == 200
    assert response.json()[0]["child_first_name"] == "Léa"
    _, called_schedule_id, acting_teacher, batch = mock.call_args.args
    assert called_schedule_id == schedule_id
    assert acting_teacher == as_teacher.id
    assert batch[0].status == "PRESENT"


def test_mark_attendance_statut_invalide(client, as_teacher):
    response = client.post(f"/api/v1/schedules/{uuid.uuid4()}/attendance", json={
        "records": [{"child_id": str(uuid.uuid4()), "status": "LATE"}],
    })
    assert response.status_code == 422


def test_mark_attendance_doublon(client, as_teacher):
    child_id = str(uuid.uuid4())
    with patch("app.routers.schedules.attendance_service.mark_attendance") as mock:
        response = client.post(f"/api/v1/schedules/{uuid.uuid4()}/attendance", json={
            "records": [{"child_id": child_id, "status": "PRESENT"}, {"child_id": child_id, "status": "ABSENT"}],
        })
    assert response.status_code == 422
    mock.assert_not_called()


def test_mark_attendance_autre_enseignant(client, as_teacher):
    with patch("app.routers.schedules.attendance_service.mark_attendance") as mock:
        mock.side_effect = ForbiddenError("Seul l'enseignant de la séance peut marquer les présences.")
        response = client.post(f"/api/v1/schedules/{uuid.uuid4()}/attendance", json={
            "records": [{"child_id": str(uuid.uuid4()), "status": "PRESENT"}],
        })
    assert response.status_code == 403


def test_mark_attendance_par_un_admin_refuse(client, as_admin):
    response = client.post(f"/api/v1/schedules/{uuid.uuid4()}/attendance", json={
        "records": [{"child_id": str(uuid.uuid4()), "status": "PRESENT"}],
    })
    assert response.status_code == 403


def test_mark_attendance_seance_introuvable(client, as_teacher):
    with patch("app.routers.schedules.attendance_service.mark_attendance") as mock:
        mock.side_effect = NotFoundError("Séance introuvable.")
        response = client.post(f"/api/v1/schedules/{uuid.uuid4()}/attendance", json={
            "records": [{"child_id": str(uuid.uuid4()), "status": "ABSENT"}],
        })
    assert response.status_code == 404
    assert response.json() == {"detail": "Séance introuvable."}


def test_export_attendance_csv(client, as_teacher):
    schedule_id = uuid.uuid4()
    with patch("app.routers.schedules.attendance_service.export_schedule_attendance_csv") as mock:
        mock.return_value = "\ufeffchild_id;last_name\r\n"
        response = client.get(f"/api/v1/schedules/{schedule_id}/attendance/export")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert f"presences_{schedule_id}.csv" in response.headers["content-disposition"]


def test_export_attendance_csv_parent_refuse(client, as_parent):
    response = client.get(f"/api/v1/schedules/{uuid.uuid4()}/attendance/export")
    assert response.status_code == 403
