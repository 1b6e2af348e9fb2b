"""Database configuration and session management."""

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from invoice_numbering.config import settings
from invoice_numbering.utils.logger import logger

# alembic.ini lives at the project root, next to the package directory
_ALEMBIC_INI = str(Path(__file__).parent.parent / "alembic.ini")

_connect_args = (
    {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
)

# Create engine
engine = create_engine(
    settings.database_url, echo=settings.debug, connect_args=_connect_args
)

# Create session factory
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)

# Create base class for models
Base = declarative_base()


def init_db():
    """Initialize database using Alembic migrations.

    Strategy:
    - Fresh DB (no tables): create_all() for full schema, then stamp Alembic at head.
    - Existing DB without a recorded revision: stamp at head.
    - Existing DB with alembic_version: upgrade to apply pending migrations.
    - No alembic.ini (installed without the project tree): create_all() only.
    """
    import invoice_numbering.models  # noqa: F401 - register all models with Base.metadata

    alembic_ini = Path(_ALEMBIC_INI)
    if not alembic_ini.exists():
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created with create_all (no alembic.ini found)")
        return

    from alembic import command
    from alembic.config import Config
    from sqlalchemy import inspect, text

    try:
        alembic_cfg = Config(str(alembic_ini))
        inspector = inspect(engine)
        has_tables = bool(inspector.get_table_names())

        alembic_has_revision = False
        if inspector.has_table("alembic_version"):
            with engine.connect() as conn:
                row = conn.execute(text("SELECT version_num FROM alembic_version LIMIT 1")).first()
                alembic_has_revision = row is not None

        if not has_tables:
            Base.metadata.create_all(bind=engine)
            command.stamp(alembic_cfg, "head")
            logger.info("Fresh database initialized and stamped at Alembic head")
        elif not alembic_has_revision:
            command.stamp(alembic_cfg, "head")
            logger.info("Stamped existing database at Alembic head")
        else:
            command.upgrade(alembic_cfg, "head")
            logger.info("Database migrations applied successfully")
    except Exception as e:
        logger.error(f"Error running database migrations: {e}")
        raise
