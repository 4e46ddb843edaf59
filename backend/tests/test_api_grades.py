"""
Tests d'intégration API pour le carnet de notes.
"""

import uuid
from datetime import datetime
from unittest.mock import patch

from app.exceptions import BadRequestError, ForbiddenError
from app.schemas.grade import GradeResponse

GRADE_PAYLOAD = {
    "child_id": str(uuid.uuid4()),
    "class_id": str(uuid.uuid4()),
    "assignment_title": "Verset de la semaine",
    "grade": "A",
    "date": "2026-10-18T10:00:00",
}


def test_create_grade_par_un_enseignant(client, as_teacher):
    grade = GradeResponse(
        id=uuid.uuid4(), child_id=uuid.uuid4(), class_id=uuid.uuid4(), teacher_id=as_teacher.id,
        assignment_title="Verset de la semaine", grade="A", notes=None, date=datetime(2026, 10, 18, 10, 0),
    )
    with patch("app.routers.grades.grade_service.create_grade", return_value=grade) as mock:
        response = client.post("/api/v1/grades", json=GRADE_PAYLOAD)
    assert response.status_code == 201
    assert mock.call_args.args[1] == as_teacher.id


def test_create_grade_par_un_parent(client, as_parent):
    response = client.post("/api/v1/grades", json=GRADE_PAYLOAD)
    assert response.status_code == 403


def test_create_grade_classe_d_un_autre_enseignant(client, as_teacher):
    with patch("app.routers.grades.grade_service.create_grade") as mock:
        mock.side_effect = ForbiddenError("Seul l'enseignant de la classe peut noter ses élèves.")
        response = client.post("/api/v1/grades", json=GRADE_PAYLOAD)
    assert response.status_code == 403


def test_create_grade_enfant_hors_classe(client, as_teacher):
    with patch("app.routers.grades.grade_service.create_grade") as mock:
        mock.side_effect = BadRequestError("L'enfant n'est pas inscrit dans cette classe.")
        response = client.post("/api/v1/grades", json=GRADE_PAYLOAD)
    assert response.status_code == 400
    assert "pas inscrit" in response.json()["detail"]


def test_class_grades_transmet_l_utilisateur(client, as_admin):
    with patch("app.routers.grades.grade_service.get_class_grades", return_value=[]) as mock:
        response = client.get(f"/api/v1/grades/class/{uuid.uuid4()}")
    assert response.status_code == 200
    assert mock.call_args.args[2] == as_admin


def test_child_grades_refuse_aux_enseignants(client, as_teacher):
    response = client.get(f"/api/v1/grades/child/{uuid.uuid4()}")
    assert response.status_code == 403
