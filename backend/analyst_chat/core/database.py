from pathlib import Path

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from analyst_chat.core.config import settings


def create_db_engine(db_path: Path, echo: bool = False) -> Engine:
    return create_engine(
        f"sqlite:///{db_path}",
        echo=echo,
        connect_args={"check_same_thread": False},
    )


engine = create_db_engine(settings.db_path, echo=settings.debug)


def init_db() -> None:
    import analyst_chat.models  # noqa: F401 - ensure models are registered
    SQLModel.metadata.create_all(engine)
