from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from bookly.core.config import settings


def _engine_kwargs(url: str) -> dict:
    # SQLite connections are handed between the threadpool workers FastAPI runs sync routes on
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
