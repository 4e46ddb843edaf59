"""
Tests d'intégration API pour les enfants et leur historique de présences.
"""

import uuid
from datetime import date, datetime
from unittest.mock import patch

from app.exceptions import NotFoundError
from app.schemas.attendance import ChildAttendanceItem
from app.schemas.child import ChildResponse


def make_child_response(parent_id) -> ChildResponse:
    return ChildResponse(
        id=uuid.uuid4(), first_name="Léa", last_name="Dupont", date_of_birth=date(2019, 5, 2),
        parent_id=parent_id, assigned_class_id=None, allergies=None, special_notes=None,
    )


def test_register_child(client, as_parent):
    with patch("app.routers.children.child_service.register_child") as mock:
        mock.return_value = make_child_response(as_parent.id)
        response = client.post("/api/v1/children", json={
            "first_name": "Léa", "last_name": "Dupont", "date_of_birth": "2019-05-02",
        })

    assert response.status_code == 201
    assert mock.call_args.args[1] == as_parent.id
    assert response.json()["parent_id"] == str(as_parent.id)


def test_register_child_par_un_enseignant(client, as_teacher):
    response = client.post("/api/v1/children", json={
        "first_name": "Léa", "last_name": "Dupont", "date_of_birth": "2019-05-02",
    })
    assert response.status_code == 403


def test_update_child_d_un_autre_parent(client, as_parent):
    with patch("app.routers.children.child_service.update_child") as mock:
        mock.side_effect = NotFoundError("Enfant introuvable ou accès refusé.")
        response = client.put(f"/api/v1/children/{uuid.uuid4()}", json={"first_name": "Léna"})
    assert response.status_code == 404


def test_children_by_class(client, as_teacher):
    with patch("app.routers.children.child_service.get_children_by_class", return_value=[]):
        response = client.get(f"/api/v1/children/class/{uuid.uuid4()}")
    assert response.status_code == 200


def test_child_attendance(client, as_parent):
    child_id = uuid.uuid4()
    item = ChildAttendanceItem(
        id=uuid.uuid4(), schedule_id=uuid.uuid4(), schedule_date=datetime(2026, 10, 18, 9, 30),
        class_id=uuid.uuid4(), class_name="Petits", status="PRESENT", notes=None, created_at=None,
    )
    with patch("app.routers.children.attendance_service.get_child_attendance", return_value=[item]) as mock:
        response = client.get(f"/api/v1/children/{child_id}/attendance")

    assert response.status_code == 200
    assert response.json()[0]["class_name"] == "Petits"
    assert mock.call_args.args[2] == as_parent


def test_child_attendance_bornes_converties_en_utc(client, as_parent):
    with patch("app.routers.children.attendance_service.get_child_attendance", return_value=[]) as mock:
        response = client.get(
            f"/api/v1/children/{uuid.uuid4()}/attendance",
            params={"start": "2026-10-01T00:00:00+02:00", "end": "2026-10-31T23:59:00Z"},
        )

    assert response.status_code == 200
    assert mock.call_args.args[3] == datetime(2026, 9, 30, 22, 0)
    assert mock.call_args.args[4] == datetime(2026, 10, 31, 23, 59)


def test_child_attendance_par_un_enseignant(client, as_teacher):
    response = client.get(f"/api/v1/children/{uuid.uuid4()}/attendance")
    assert response.status_code == 403
