"""
Tests du job de publication des annonces.
"""

from unittest.mock import MagicMock, patch

from app.event_bus import InMemoryEventBus
from app.scheduler import publish_due_announcements


def test_job_appelle_promote_et_ferme_la_session():
    bus = InMemoryEventBus()
    db = MagicMock()
    with patch("app.database.SessionLocal", return_value=db), \
         patch("app.services.event_service.promote_due_events", return_value=2) as mock_promote:
        publish_due_announcements(bus)

    mock_promote.assert_called_once_with(db, bus)
    db.close.assert_called_once()


def test_job_erreur_journalisee_session_fermee():
    db = MagicMock()
    with patch("app.database.SessionLocal", return_value=db), \
         patch("app.services.event_service.promote_due_events", side_effect=RuntimeError("db down")):
        publish_due_announcements(InMemoryEventBus())

    db.close.assert_called_once()
