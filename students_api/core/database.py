import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool

from .config import Settings

# Create Base class for models
Base = declarative_base()


# =============================================================================
# DATABASE ENGINE CONFIGURATION
# =============================================================================

def build_engine(settings: Settings, logger: logging.Logger) -> Engine:
    """
    Create the database engine with a bounded connection pool.

    At most DB_POOL_SIZE connections are kept idle and
    DB_POOL_SIZE + DB_MAX_OVERFLOW may be open at once.
    """
    url = make_url(settings.database_url)
    connect_args = {}
    if url.get_backend_name() == "sqlite":
        # Pooled connections are shared across the request threadpool
        connect_args["check_same_thread"] = False

    engine = create_engine(
        url,

        # Connection pool settings
        poolclass=QueuePool,
        pool_size=settings.DB_POOL_SIZE,  # Connections kept open when idle
        max_overflow=settings.DB_MAX_OVERFLOW,  # Max connections beyond pool_size
        pool_timeout=settings.DB_POOL_TIMEOUT,  # Seconds to wait for a free connection
        pool_recycle=settings.DB_POOL_RECYCLE,  # Max connection lifetime in seconds

        # Test connection before using (detect disconnects)
        pool_pre_ping=True,

        echo=settings.DB_ECHO_SQL,
        connect_args=connect_args,
    )
    _register_pool_listeners(engine, logger)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        expire_on_commit=False  # Rows stay readable after the transaction commits
    )


# =============================================================================
# DATABASE UTILITIES
# =============================================================================

def create_database_tables(engine: Engine, logger: logging.Logger) -> None:
    """
    Create all tables defined in models. Existing tables are left untouched.
    """
    # Register the models on Base.metadata
    from students_api.models import student  # noqa: F401

    logger.info("Ensuring database tables exist...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")


def check_database_connection(engine: Engine) -> None:
    """
    Open a connection and run a trivial query.

    Raises:
        sqlalchemy.exc.SQLAlchemyError: if the database cannot be reached
    """
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))


# =============================================================================
# EVENT LISTENERS
# =============================================================================

def _register_pool_listeners(engine: Engine, logger: logging.Logger) -> None:
    @event.listens_for(engine, "connect")
    def receive_connect(dbapi_conn, connection_record):
        logger.debug("New database connection established")

    @event.listens_for(engine, "checkout")
    def receive_checkout(dbapi_conn, connection_record, connection_proxy):
        logger.debug("Connection checked out from pool")
