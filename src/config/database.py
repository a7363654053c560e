import contextlib
from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from src.config.settings import settings


def create_engine(url: str):
    url = str(url)
    use_echo = settings.LOG_DB
    kwargs = {}
    if "sqlite" in url:
        # connections are not shared across event loops in tests
        kwargs = {"connect_args": {"timeout": 15}, "poolclass": NullPool}
    return create_async_engine(
        url,
        echo=use_echo,
        future=True,  # use the sqlalchemy 2.0 classes
        **kwargs,
    )


engine = create_engine(settings.database_url)

async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


async def get_async_session() -> AsyncIterator[AsyncSession]:
    async with async_session_maker() as session:
        yield session


@contextlib.asynccontextmanager
async def async_session_manager(
    auto_commit=True, session_overwrite: AsyncSession | None = None
) -> AsyncIterator[AsyncSession]:
    if session_overwrite:
        yield session_overwrite
    else:
        async with async_session_maker() as session:
            try:
                yield session
            except Exception as e:
                await session.rollback()
                raise e
            else:
                if auto_commit:
                    await session.commit()
