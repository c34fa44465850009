"""Container entrypoint: wait for the database, migrate, bootstrap.

    python -m formportal.scripts.migrate
"""
from __future__ import annotations

import logging
import os
import time
import subprocess
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from formportal.core.config import settings
from formportal.core.security import hash_password
from formportal.db.models.user import User, Role

logger = logging.getLogger("formportal.migrate")


def wait_for_db(engine, timeout_s: int = 60) -> None:
    started = time.monotonic()
    delay = 1.0
    while True:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return
        except OperationalError as e:
            if time.monotonic() - started > timeout_s:
                raise
            logger.info("Database not ready (%s), retrying in %.1fs", e.orig, delay)
            time.sleep(delay)
            delay = min(delay * 1.5, 5.0)


def alembic(*args: str) -> int:
    return subprocess.run(["alembic", *args], check=False).returncode


def ensure_default_admin(db: Session) -> bool:
    """Create the configured admin account unless that email is taken.

    Returns True when an account was created.
    """
    email = settings.DEFAULT_ADMIN_EMAIL.strip().lower()
    if db.query(User).filter(User.email == email).first():
        return False
    db.add(
        User(
            name=settings.DEFAULT_ADMIN_NAME,
            email=email,
            phone="",
            password_hash=hash_password(settings.DEFAULT_ADMIN_PASSWORD),
            role=Role.ADMIN,
        )
    )
    db.flush()
    logger.info("Created default admin %s", email)
    return True


def main() -> int:
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    engine = create_engine(os.getenv("DATABASE_DSN") or settings.DATABASE_DSN, pool_pre_ping=True)
    wait_for_db(engine, timeout_s=int(os.getenv("DB_WAIT_TIMEOUT", "90")))

    tables = set(inspect(engine).get_table_names())
    if "banks" in tables and "alembic_version" not in tables:
        # schema created outside alembic: adopt it as head
        rc = alembic("stamp", "head")
    else:
        rc = alembic("upgrade", "head")
    if rc != 0:
        logger.error("alembic exited with %s", rc)
        return rc

    from formportal.db.session import SessionLocal
    from formportal.scripts.seed_sample import seed_sample

    with SessionLocal() as db:
        if settings.AUTO_CREATE_ADMIN:
            ensure_default_admin(db)
        if settings.AUTO_SEED_SAMPLE:
            seed_sample(db)
        db.commit()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
