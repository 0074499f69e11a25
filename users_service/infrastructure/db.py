from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from ..config import settings


def make_engine(url: str):
    connect_args = {}
    options = {}
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
    else:
        options = {"pool_size": 10, "max_overflow": 20, "pool_recycle": 3600}
        # Добавляем параметры кодировки для PostgreSQL
        if url.startswith("postgresql"):
            connect_args = {"client_encoding": "utf8"}
    return create_engine(
        url,
        pool_pre_ping=True,
        connect_args=connect_args,
        echo=False,
        **options,
    )


engine = make_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

def get_db():
    db = SessionLocal()
    try: yield db
    finally: db.close()
