from sqlmodel import SQLModel, Session, create_engine
from .config import DATABASE_URL

# SQLAlchemy database engine
engine = create_engine(DATABASE_URL, pool_pre_ping=True)


def create_db_and_tables():
    # Tables are registered on SQLModel.metadata when the models are imported
    from .models import user_submission  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
