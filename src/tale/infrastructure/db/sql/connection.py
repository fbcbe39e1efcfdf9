from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker


def build_engine(url: str) -> Engine:
    return create_engine(url, echo=False, future=True)


def build_session_factory(url: str) -> sessionmaker:
    return sessionmaker(bind=build_engine(url), future=True, expire_on_commit=False)
