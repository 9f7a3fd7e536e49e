import psycopg2
from psycopg2 import sql
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
from bookly.core.config import settings
import logging

logger = logging.getLogger(__name__)

def create_database():
    """Create the PostgreSQL database if it doesn't exist. No-op for other backends."""
    if not settings.is_postgres:
        logger.info("Non-PostgreSQL database configured, skipping database creation.")
        return

    try:
        # Connect to default 'postgres' database to check/create target DB
        con = psycopg2.connect(
            user=settings.POSTGRES_USER,
            password=settings.POSTGRES_PASSWORD,
            host=settings.POSTGRES_SERVER,
            port=settings.POSTGRES_PORT,
            dbname="postgres"
        )
        con.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
        cur = con.cursor()

        cur.execute("SELECT 1 FROM pg_catalog.pg_database WHERE datname = %s", (settings.POSTGRES_DB,))
        exists = cur.fetchone()

        if not exists:
            logger.info("Database %s does not exist. Creating...", settings.POSTGRES_DB)
            cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(settings.POSTGRES_DB)))
            logger.info("Database %s created successfully.", settings.POSTGRES_DB)
        else:
            logger.info("Database %s already exists.", settings.POSTGRES_DB)

        cur.close()
        con.close()
    except psycopg2.Error as e:
        # DATABASE_URL may point at an existing database the server user cannot list
        logger.error("Error creating database: %s", e)


def init_db(bind=None):
    """Create all tables on the given engine (defaults to the app engine)."""
    from bookly.db.base import Base
    from bookly.db.session import engine

    Base.metadata.create_all(bind=bind or engine)


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    create_database()
    init_db()
