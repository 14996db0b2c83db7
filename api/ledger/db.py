from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from .config import get_settings


settings = get_settings()

# SQLite needs check_same_thread=False since FastAPI hands sessions across threads
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

# Synchronous SQLAlchemy engine; psycopg for PostgreSQL deployments
engine = create_engine(settings.database_url, future=True, connect_args=connect_args)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
