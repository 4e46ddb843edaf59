"""
Planificateur APScheduler pour la publication des annonces programmées.

Le job s'exécute à intervalle fixe (ANNOUNCEMENT_JOB_INTERVAL_SECONDS) : les
événements SCHEDULED dont la date de publication est échue passent en SENT et
sont diffusés sur le bus d'événements reçu au démarrage.
"""

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from app.config import settings
from app.database import session_scope
from app.event_bus import EventBus

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def publish_due_announcements(bus: EventBus) -> None:
    """
    Tâche planifiée : publie les annonces dont l'heure est venue.
    Une erreur est journalisée ; le passage suivant retentera les mêmes événements.
    Import local pour éviter les imports circulaires.
    """
    from app.services.event_service import promote_due_events

    try:
        with session_scope() as db:
            count = promote_due_events(db, bus)
        if count:
            logger.info("Job annonces : %d événement(s) envoyé(s)", count)
    except Exception as exc:
        logger.error("Erreur lors de la publication des annonces : %s", exc, exc_info=True)


def start_scheduler(bus: EventBus) -> None:
    """Démarre le planificateur en arrière-plan (appelé au démarrage de l'API)."""
    scheduler.add_job(
        publish_due_announcements,
        trigger="interval",
        seconds=settings.ANNOUNCEMENT_JOB_INTERVAL_SECONDS,
        args=[bus],
        id="announcement_publisher",
        replace_existing=True,
        max_instances=1,
    )
    scheduler.start()
    logger.info(
        "Scheduler démarré : publication des annonces toutes les %d s.",
        settings.ANNOUNCEMENT_JOB_INTERVAL_SECONDS,
    )


def stop_scheduler() -> None:
    """Arrête le planificateur proprement (appelé à l'arrêt de l'API)."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler arrêté.")
