"""
Connexion PostgreSQL et fabrique de sessions SQLAlchemy.

Les requêtes HTTP obtiennent leur session par la dépendance get_db ;
les tâches de fond (scheduler) passent par session_scope.
"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.config import settings

# pool_pre_ping : le job d'annonces garde des connexions ouvertes entre deux passages
engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Iterator[Session]:
    """Dépendance FastAPI : une session par requête, fermée après la réponse."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session hors requête HTTP. Les services gèrent eux-mêmes commit et rollback."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
