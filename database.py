from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import config as settings

# SQLite needs special connect args; Postgres does not
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.SQL_ECHO,
    connect_args=connect_args,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db():
    import models  # noqa: F401
    from db_base import Base

    Base.metadata.create_all(bind=engine)
