from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import PersistenceError


class BaseSqlRepo:
    """
    Shared session handling for SQLAlchemy repositories.

    Driver and ORM failures leave the repository as PersistenceError so that use cases
    never have to know about SQLAlchemy.
    """

    def __init__(
        self, session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None
    ):
        self.session_factory = session_factory

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        if self.session_factory is None:
            raise RuntimeError('No session_factory available')
        try:
            async with self.session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            raise PersistenceError(f'Database operation failed: {type(e).__name__}') from e
