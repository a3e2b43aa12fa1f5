from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from ..app.config import Config


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str = None, **kwargs):
    url = url or Config.DATABASE_URL
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)
    new_engine = create_engine(url, echo=Config.DB_ECHO, **kwargs)
    if is_sqlite:
        # SQLite only enforces foreign keys when asked to, per connection
        event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)
    return new_engine


# Create the SQLAlchemy engine
engine = build_engine()

# Create a configured "Session" class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create a base class for our models
Base = declarative_base()

def get_db():
    """Dependency to get a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """Commit the body's work, or roll all of it back on any exception."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def lock_row(query):
    """SELECT ... FOR UPDATE; dialects without row locks ignore the clause."""
    return query.with_for_update()


def create_tables(bind=None):
    """Create all tables in the database."""
    # Import all models here before calling create_all
    # This ensures they are registered with the Base metadata
    from . import models  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)


if __name__ == "__main__":
    create_tables()
    print("Database tables created successfully.")
