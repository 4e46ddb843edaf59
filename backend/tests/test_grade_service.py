"""
Tests unitaires pour le carnet de notes : contrôle du titulaire de la classe,
de l'inscription de l'enfant et de l'accès des parents.
"""

import uuid
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from app.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.models.child import Child
from app.models.school_class import SchoolClass
from app.schemas.grade import GradeCreate
from app.schemas.user import CurrentUser
from app.services.grade_service import create_grade, get_child_grades, get_class_grades

TEACHER_ID = uuid.uuid4()
PARENT_ID = uuid.uuid4()
CLASS_ID = uuid.uuid4()


# --- Helpers ---

def make_class_mock(teacher_id=TEACHER_ID):
    c = MagicMock()
    c.id = CLASS_ID
    c.teacher_id = teacher_id
    return c


def make_child_mock(assigned_class_id=CLASS_ID, parent_id=PARENT_ID):
    child = MagicMock()
    child.id = uuid.uuid4()
    child.assigned_class_id = assigned_class_id
    child.parent_id = parent_id
    return child


def make_db_mock(school_class=None, child=None, rows=None):
    db = MagicMock()
    objects = {SchoolClass: school_class, Child: child}
    db.get.side_effect = lambda model, _id: objects.get(model)
    db.execute.return_value.all.return_value = rows or []
    return db


def make_grade_row(child_id, title="Verset de la semaine"):
    g = MagicMock()
    g.id = uuid.uuid4()
    g.child_id = child_id
    g.class_id = CLASS_ID
    g.teacher_id = TEACHER_ID
    g.assignment_title = title
    g.grade = "A"
    g.notes = None
    g.date = datetime(2026, 10, 18, 10, 0)
    g.created_at = None
    return g


def grade_data(child_id, class_id=CLASS_ID):
    return GradeCreate(
        child_id=child_id, class_id=class_id, assignment_title="Verset de la semaine",
        grade="A", date=datetime(2026, 10, 18, 10, 0),
    )


def user(role, user_id=None):
    return CurrentUser(id=user_id or uuid.uuid4(), name="Test", email="t@test.be", role=role)


# --- Validation ---

def test_grade_titre_vide_rejete():
    with pytest.raises(ValidationError):
        GradeCreate(
            child_id=uuid.uuid4(), class_id=CLASS_ID, assignment_title="  ",
            grade="A", date=datetime(2026, 10, 18),
        )


# --- create_grade ---

def test_create_grade_par_le_titulaire():
    child = make_child_mock()
    db = make_db_mock(make_class_mock(), child)

    with patch("app.services.grade_service.GradeResponse"):
        create_grade(db, TEACHER_ID, grade_data(child.id))

    added = db.add.call_args.args[0]
    assert added.teacher_id == TEACHER_ID
    assert added.child_id == child.id
    db.commit.assert_called_once()


def test_create_grade_autre_enseignant_refuse():
    child = make_child_mock()
    db = make_db_mock(make_class_mock(), child)

    with pytest.raises(ForbiddenError):
        create_grade(db, uuid.uuid4(), grade_data(child.id))
    db.add.assert_not_called()


def test_create_grade_enfant_hors_classe():
    child = make_child_mock(assigned_class_id=uuid.uuid4())
    db = make_db_mock(make_class_mock(), child)

    with pytest.raises(BadRequestError, match="pas inscrit"):
        create_grade(db, TEACHER_ID, grade_data(child.id))
    db.add.assert_not_called()


def test_create_grade_enfant_introuvable():
    db = make_db_mock(make_class_mock(), None)
    with pytest.raises(NotFoundError, match="Enfant"):
        create_grade(db, TEACHER_ID, grade_data(uuid.uuid4()))


def test_create_grade_classe_introuvable():
    child = make_child_mock()
    db = make_db_mock(None, child)
    with pytest.raises(NotFoundError, match="Classe"):
        create_grade(db, TEACHER_ID, grade_data(child.id))


# --- get_class_grades ---

def test_class_grades_par_le_titulaire():
    child_id = uuid.uuid4()
    db = make_db_mock(make_class_mock(), rows=[(make_grade_row(child_id), "Léa", "Dupont")])

    result = get_class_grades(db, CLASS_ID, user("TEACHER", TEACHER_ID))

    assert len(result) == 1
    assert result[0].child_id == child_id
    assert result[0].child_last_name == "Dupont"


def test_class_grades_autre_enseignant_refuse():
    db = make_db_mock(make_class_mock())
    with pytest.raises(ForbiddenError):
        get_class_grades(db, CLASS_ID, user("TEACHER"))
    db.execute.assert_not_called()


def test_class_grades_admin_autorise():
    db = make_db_mock(make_class_mock(), rows=[])
    assert get_class_grades(db, CLASS_ID, user("ADMIN")) == []


# --- get_child_grades ---

def test_child_grades_parent_proprietaire():
    child = make_child_mock()
    db = make_db_mock(child=child, rows=[(make_grade_row(child.id), "Petits")])

    result = get_child_grades(db, child.id, user("PARENT", PARENT_ID))

    assert result[0].class_name == "Petits"
    assert result[0].grade == "A"


def test_child_grades_enfant_d_un_autre_parent():
    child = make_child_mock()
    db = make_db_mock(child=child)

    with pytest.raises(NotFoundError, match="accès refusé"):
        get_child_grades(db, child.id, user("PARENT"))
    db.execute.assert_not_called()
