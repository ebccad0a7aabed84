import uuid

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


def new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    @declared_attr.directive
    def __tablename__(cls) -> str:  # type: ignore
        return cls.__name__.lower()


class IdMixin:
    """Opaque string primary key shared by every table."""

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
