from sqlmodel import SQLModel, create_engine, Session, select
from sqlalchemy.pool import StaticPool
from app.core.config import settings
import logging

logger = logging.getLogger(__name__)

# Ensure the URL uses postgresql:// (not postgres://) for SQLAlchemy
db_url = settings.database_url
if db_url.startswith("postgres://"):
    # SQLAlchemy prefers postgresql:// over postgres://
    db_url = db_url.replace("postgres://", "postgresql://", 1)

logger.info(f"Connecting to database: {db_url[:20]}...")  # Log partial URL for debugging

if db_url.startswith("sqlite"):
    # In-memory SQLite (tests, local runs) must share one connection across threads
    engine = create_engine(
        db_url,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(
        db_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=5,
        max_overflow=10,
    )


# Reference data inserted when the languages table is empty
DEFAULT_LANGUAGES = [
    {"name": "English", "iso_2": "en", "flag_emoji": "🇬🇧"},
    {"name": "Italian", "iso_2": "it", "flag_emoji": "🇮🇹"},
    {"name": "Spanish", "iso_2": "es", "flag_emoji": "🇪🇸"},
    {"name": "French", "iso_2": "fr", "flag_emoji": "🇫🇷"},
    {"name": "German", "iso_2": "de", "flag_emoji": "🇩🇪"},
    {"name": "Dutch", "iso_2": "nl", "flag_emoji": "🇳🇱"},
    {"name": "Portuguese", "iso_2": "pt", "flag_emoji": "🇵🇹"},
    {"name": "Polish", "iso_2": "pl", "flag_emoji": "🇵🇱"},
]


def get_session():
    """Dependency for getting database sessions."""
    with Session(engine) as session:
        yield session


def seed_languages(session: Session) -> int:
    """
    Insert the default languages if the languages table is empty.

    Returns:
        Number of languages inserted
    """
    from app.models.language import Language

    if session.exec(select(Language)).first() is not None:
        return 0

    for lang in DEFAULT_LANGUAGES:
        session.add(Language(**lang))
    session.commit()
    logger.info(f"Seeded {len(DEFAULT_LANGUAGES)} languages")
    return len(DEFAULT_LANGUAGES)


def init_db():
    """Initialize database tables and reference data."""
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        seed_languages(session)
