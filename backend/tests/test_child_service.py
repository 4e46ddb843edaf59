"""
Tests unitaires pour les enfants inscrits par les parents.
"""

import uuid
from datetime import date, timedelta
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from app.exceptions import NotFoundError
from app.schemas.child import ChildCreate, ChildUpdate
from app.services.child_service import delete_child, get_children_by_class, register_child, update_child

PARENT_ID = uuid.uuid4()


def make_child_mock(parent_id=PARENT_ID):
    child = MagicMock()
    child.id = uuid.uuid4()
    child.parent_id = parent_id
    child.first_name = "Léa"
    return child


def test_date_de_naissance_future_refusee():
    with pytest.raises(ValidationError):
        ChildCreate(first_name="Léa", last_name="Dupont", date_of_birth=date.today() + timedelta(days=1))


def test_register_child_rattache_au_parent():
    db = MagicMock()
    with patch("app.services.child_service.ChildResponse"):
        register_child(db, PARENT_ID, ChildCreate(first_name="Léa", last_name="Dupont", date_of_birth=date(2019, 5, 2)))

    child = db.add.call_args.args[0]
    assert child.parent_id == PARENT_ID
    assert child.assigned_class_id is None


def test_update_child_proprietaire():
    child = make_child_mock()
    db = MagicMock()
    db.get.return_value = child

    with patch("app.services.child_service.ChildResponse"):
        update_child(db, PARENT_ID, child.id, ChildUpdate(first_name="Léna"))

    assert child.first_name == "Léna"
    db.commit.assert_called_once()


def test_update_child_autre_parent():
    child = make_child_mock(parent_id=uuid.uuid4())
    db = MagicMock()
    db.get.return_value = child

    with pytest.raises(NotFoundError, match="accès refusé"):
        update_child(db, PARENT_ID, child.id, ChildUpdate(first_name="Léna"))
    assert child.first_name == "Léa"


def test_delete_child_autre_parent():
    db = MagicMock()
    db.get.return_value = make_child_mock(parent_id=uuid.uuid4())

    with pytest.raises(NotFoundError):
        delete_child(db, PARENT_ID, uuid.uuid4())
    db.delete.assert_not_called()


def test_delete_child_proprietaire():
    child = make_child_mock()
    db = MagicMock()
    db.get.return_value = child

    delete_child(db, PARENT_ID, child.id)
    db.delete.assert_called_once_with(child)


def test_get_children_by_class_introuvable():
    db = MagicMock()
    db.get.return_value = None
    with pytest.raises(NotFoundError, match="Classe introuvable"):
        get_children_by_class(db, uuid.uuid4())
