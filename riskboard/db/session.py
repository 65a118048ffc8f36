from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from riskboard.core.config import settings

# One engine per process; its pool is shared by every request.
engine = create_engine(
    settings.database_url,
    pool_size=settings.db_pool_size,
    pool_pre_ping=True,
    echo=settings.db_echo,
    future=True,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
