"""
Bus d'événements applicatif pour la diffusion des annonces.

Le job de publication reçoit le bus en paramètre ; l'instance de l'application
vit dans app.state.event_bus (créée au démarrage).
"""

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], None]

NEW_ANNOUNCEMENT = "new_announcement"


class EventBus(ABC):
    @abstractmethod
    def publish(self, topic: str, payload: Dict[str, Any]) -> None:
        """Diffuse un message à tous les abonnés du sujet."""

    @abstractmethod
    def subscribe(self, topic: str, handler: Handler) -> None:
        """Enregistre un abonné pour un sujet."""


class InMemoryEventBus(EventBus):
    """
    Implémentation en mémoire, synchrone.
    Un abonné en erreur est journalisé et n'empêche pas la livraison aux suivants.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, topic: str, handler: Handler) -> None:
        self._handlers[topic].append(handler)

    def publish(self, topic: str, payload: Dict[str, Any]) -> None:
        handlers = list(self._handlers.get(topic, []))
        logger.debug("Publication '%s' vers %d abonné(s)", topic, len(handlers))
        for handler in handlers:
            try:
                handler(payload)
            except Exception:
                logger.exception("Abonné en erreur sur le sujet '%s'", topic)
