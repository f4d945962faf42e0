from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from splitledger.core.config import settings

engine = create_async_engine(settings.DATABASE_URL, future=True)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


async def init_models():
    # Register every table on Base.metadata before create_all
    import splitledger.models.user  # noqa: F401
    import splitledger.models.group  # noqa: F401
    import splitledger.models.group_member  # noqa: F401
    import splitledger.models.expense  # noqa: F401
    import splitledger.models.expense_split  # noqa: F401
    import splitledger.models.settlement  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
