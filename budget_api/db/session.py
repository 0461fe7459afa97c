from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from budget_api.core.config import settings

# This Base class tracks all our models
Base = declarative_base()


def build_engine(url: str):
    # pool_pre_ping=True handles "stale" connections gracefully
    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False})

        # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine
    return create_engine(url, pool_pre_ping=True)


# 1. Create the Database Engine
engine = build_engine(settings.DATABASE_URL)

# 2. Create a Session Factory
# This is what generates a new "handle" to the database for every request
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# 3. The Dependency
# One session per request, closed when the request is done.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
