"""
Tests unitaires pour le service de gestion des classes et le garde de capacité.
"""

import uuid
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from app.exceptions import BadRequestError, CapacityExceededError, ConflictError, NotFoundError
from app.schemas.school_class import ClassCreate, ClassUpdate
from app.services.class_service import (
    archive_class,
    assign_child_to_class,
    create_class,
    delete_class,
    get_class,
    remove_child_from_class,
    update_class,
)


# --- Helpers ---

def make_class_mock(class_id=None, name="Petits", capacity=2, archived=False):
    c = MagicMock()
    c.id = class_id or uuid.uuid4()
    c.name = name
    c.capacity = capacity
    c.archived = archived
    return c


def make_child_mock(child_id=None, assigned_class_id=None):
    child = MagicMock()
    child.id = child_id or uuid.uuid4()
    child.assigned_class_id = assigned_class_id
    return child


def make_db_mock(school_class=None, child=None):
    """db.execute(...).scalar() renvoie la classe verrouillée, db.get l'enfant."""
    db = MagicMock()
    db.execute.return_value.scalar.return_value = school_class
    db.get.return_value = child
    return db


# --- Validation des schémas ---

def test_class_create_capacite_nulle_rejetee():
    with pytest.raises(ValidationError):
        ClassCreate(name="Petits", age_range="3-5", capacity=0)


def test_class_create_nom_vide_rejete():
    with pytest.raises(ValidationError):
        ClassCreate(name="   ", age_range="3-5", capacity=10)


def test_class_create_strip():
    c = ClassCreate(name="  Petits  ", age_range=" 3-5 ", capacity=10)
    assert c.name == "Petits"
    assert c.age_range == "3-5"


# --- create_class ---

def test_create_class_succes():
    db = make_db_mock()
    with patch("app.services.class_service._to_response") as mock_resp:
        mock_resp.return_value = MagicMock()
        result = create_class(db, ClassCreate(name="Petits", age_range="3-5", capacity=10))

    db.add.assert_called_once()
    db.commit.assert_called_once()
    assert result is mock_resp.return_value


def test_create_class_nom_duplique():
    db = make_db_mock()
    db.commit.side_effect = IntegrityError("dup", {}, None)

    with pytest.raises(ConflictError, match="existe déjà"):
        create_class(db, ClassCreate(name="Petits", age_range="3-5", capacity=10))
    db.rollback.assert_called_once()


def test_create_class_enseignant_pas_teacher():
    parent = MagicMock()
    parent.role = "PARENT"
    db = make_db_mock(child=parent)

    with pytest.raises(BadRequestError, match="Enseignant invalide"):
        create_class(db, ClassCreate(name="Petits", age_range="3-5", capacity=10, teacher_id=uuid.uuid4()))
    db.add.assert_not_called()


# --- get_class ---

def test_get_class_introuvable():
    db = MagicMock()
    db.get.return_value = None
    assert get_class(db, uuid.uuid4()) is None


# --- update_class ---

def test_update_class_introuvable():
    db = make_db_mock(None)
    assert update_class(db, uuid.uuid4(), ClassUpdate(name="Grands")) is None
    db.commit.assert_not_called()


def test_update_class_verrouille_la_classe():
    """La capacité est modifiée sous SELECT ... FOR UPDATE, comme une assignation."""
    school_class = make_class_mock(capacity=5)
    db = make_db_mock(school_class)

    with patch("app.services.class_service._count_students", return_value=2), \
         patch("app.services.class_service._to_response"):
        update_class(db, school_class.id, ClassUpdate(capacity=2))

    stmt = db.execute.call_args_list[0].args[0]
    assert stmt._for_update_arg is not None
    assert school_class.capacity == 2


def test_update_class_capacite_sous_effectif():
    school_class = make_class_mock(capacity=10)
    db = make_db_mock(school_class)

    with patch("app.services.class_service._count_students", return_value=5):
        with pytest.raises(BadRequestError, match="Capacité trop faible"):
            update_class(db, school_class.id, ClassUpdate(capacity=4))

    assert school_class.capacity == 10
    db.commit.assert_not_called()
    db.rollback.assert_called_once()


def test_update_class_capacite_egale_effectif_acceptee():
    school_class = make_class_mock(capacity=10)
    db = make_db_mock(school_class)

    with patch("app.services.class_service._count_students", return_value=5), \
         patch("app.services.class_service._to_response"):
        update_class(db, school_class.id, ClassUpdate(capacity=5))

    assert school_class.capacity == 5
    db.commit.assert_called_once()


def test_update_class_nom_duplique():
    school_class = make_class_mock()
    db = make_db_mock(school_class)
    db.commit.side_effect = IntegrityError("dup", {}, None)

    with pytest.raises(ConflictError, match="existe déjà"):
        update_class(db, school_class.id, ClassUpdate(name="Grands"))
    db.rollback.assert_called_once()


# --- archive / delete ---

def test_archive_class():
    school_class = make_class_mock()
    db = MagicMock()
    db.get.return_value = school_class

    with patch("app.services.class_service._to_response"):
        archive_class(db, school_class.id)

    assert school_class.archived is True
    db.commit.assert_called_once()


def test_delete_class_avec_enfants_bloquee():
    school_class = make_class_mock()
    db = MagicMock()
    db.get.return_value = school_class

    with patch("app.services.class_service._count_students", return_value=3):
        with pytest.raises(ConflictError, match="encore assignés"):
            delete_class(db, school_class.id)
    db.delete.assert_not_called()


def test_delete_class_vide():
    school_class = make_class_mock()
    db = MagicMock()
    db.get.return_value = school_class

    with patch("app.services.class_service._count_students", return_value=0):
        assert delete_class(db, school_class.id) is True
    db.delete.assert_called_once_with(school_class)


def test_delete_class_introuvable():
    db = MagicMock()
    db.get.return_value = None
    assert delete_class(db, uuid.uuid4()) is False


# --- assign_child_to_class ---

def test_assign_child_sous_capacite():
    school_class = make_class_mock(capacity=2)
    child = make_child_mock()
    db = make_db_mock(school_class, child)

    with patch("app.services.class_service._count_students", return_value=1), \
         patch("app.services.class_service._to_response"):
        assign_child_to_class(db, school_class.id, child.id)

    assert child.assigned_class_id == school_class.id
    db.commit.assert_called_once()


def test_assign_child_verrouille_la_classe():
    """La classe est lue avec SELECT ... FOR UPDATE."""
    school_class = make_class_mock()
    db = make_db_mock(school_class, make_child_mock())

    with patch("app.services.class_service._count_students", return_value=0), \
         patch("app.services.class_service._to_response"):
        assign_child_to_class(db, school_class.id, uuid.uuid4())

    stmt = db.execute.call_args_list[0].args[0]
    assert stmt._for_update_arg is not None


def test_assign_child_capacite_atteinte():
    school_class = make_class_mock(capacity=2)
    child = make_child_mock()
    db = make_db_mock(school_class, child)

    with patch("app.services.class_service._count_students", return_value=2):
        with pytest.raises(CapacityExceededError, match="capacité maximale"):
            assign_child_to_class(db, school_class.id, child.id)

    assert child.assigned_class_id is None
    db.commit.assert_not_called()
    db.rollback.assert_called_once()


def test_capacite_depassee_est_une_erreur_400():
    assert issubclass(CapacityExceededError, BadRequestError)
    assert CapacityExceededError.status_code == 400


def test_assign_trois_enfants_capacite_deux():
    """Avec une capacité de 2, le troisième enfant est refusé."""
    school_class = make_class_mock(capacity=2)
    children = [make_child_mock() for _ in range(3)]
    db = MagicMock()
    db.execute.return_value.scalar.return_value = school_class
    db.get.side_effect = children

    with patch("app.services.class_service._count_students", side_effect=[0, 1, 2]), \
         patch("app.services.class_service._to_response"):
        assign_child_to_class(db, school_class.id, children[0].id)
        assign_child_to_class(db, school_class.id, children[1].id)
        with pytest.raises(CapacityExceededError):
            assign_child_to_class(db, school_class.id, children[2].id)

    assert children[0].assigned_class_id == school_class.id
    assert children[1].assigned_class_id == school_class.id
    assert children[2].assigned_class_id is None


def test_assign_child_deja_dans_la_classe():
    """Réassigner un enfant déjà présent ne compte pas contre la capacité."""
    school_class = make_class_mock(capacity=1)
    child = make_child_mock(assigned_class_id=school_class.id)
    db = make_db_mock(school_class, child)

    with patch("app.services.class_service._count_students") as mock_count, \
         patch("app.services.class_service._to_response"):
        assign_child_to_class(db, school_class.id, child.id)

    mock_count.assert_not_called()
    assert child.assigned_class_id == school_class.id


def test_assign_child_change_de_classe():
    old_class_id = uuid.uuid4()
    school_class = make_class_mock(capacity=5)
    child = make_child_mock(assigned_class_id=old_class_id)
    db = make_db_mock(school_class, child)

    with patch("app.services.class_service._count_students", return_value=0), \
         patch("app.services.class_service._to_response"):
        assign_child_to_class(db, school_class.id, child.id)

    assert child.assigned_class_id == school_class.id


def test_assign_child_classe_introuvable():
    db = make_db_mock(None, make_child_mock())
    with pytest.raises(NotFoundError, match="Classe introuvable"):
        assign_child_to_class(db, uuid.uuid4(), uuid.uuid4())
    db.rollback.assert_called_once()


def test_assign_child_enfant_introuvable():
    db = make_db_mock(make_class_mock(), None)
    with pytest.raises(NotFoundError, match="Enfant introuvable"):
        assign_child_to_class(db, uuid.uuid4(), uuid.uuid4())


def test_assign_child_classe_archivee():
    db = make_db_mock(make_class_mock(archived=True), make_child_mock())
    with pytest.raises(BadRequestError, match="archivée"):
        assign_child_to_class(db, uuid.uuid4(), uuid.uuid4())


# --- remove_child_from_class ---

def test_remove_child_succes():
    class_id = uuid.uuid4()
    child = make_child_mock(assigned_class_id=class_id)
    db = MagicMock()
    db.get.return_value = child

    assert remove_child_from_class(db, class_id, child.id) is True
    assert child.assigned_class_id is None


def test_remove_child_pas_dans_la_classe():
    child = make_child_mock(assigned_class_id=uuid.uuid4())
    db = MagicMock()
    db.get.return_value = child

    assert remove_child_from_class(db, uuid.uuid4(), child.id) is False
    db.commit.assert_not_called()
