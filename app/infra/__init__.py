"""Infrastructure helpers such as Unit of Work implementations."""

from .unit_of_work import SqlAlchemyUnitOfWork, UnitOfWork

__all__ = ["UnitOfWork", "SqlAlchemyUnitOfWork"]
