from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from formportal.core.config import settings


def _engine_kwargs() -> dict:
    if settings.is_sqlite:
        # sqlite has no server-side pool; allow use from the threadpool
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": 30,
    }


engine = create_engine(settings.DATABASE_DSN, **_engine_kwargs())

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
