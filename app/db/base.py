from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import settings

# Normalize database URL to use psycopg3 driver if using standard postgresql://
# Skip normalization for SQLite (used in tests)
database_url = settings.database_url
if database_url.startswith("postgresql://") and "+psycopg" not in database_url:
    database_url = database_url.replace("postgresql://", "postgresql+psycopg://", 1)

engine = create_engine(database_url)

if engine.dialect.name == "sqlite":
    # SQLite only honours ON DELETE CASCADE with foreign keys switched on
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()
