"""
DigPaper - Database Session
"""
import logging
from sqlalchemy import event, select, func
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from digpaper.core.config import settings

logger = logging.getLogger(__name__)

IS_SQLITE = settings.DATABASE_URL.startswith("sqlite")

GERAL_PROJECT_NAME = "Geral"

# Filtros criados quando a tabela está vazia (logótipos, assinaturas, redes sociais)
DEFAULT_EMAIL_FILTERS = [
    ("logo", "filename"),
    ("signature", "filename"),
    ("banner", "filename"),
    ("icon", "filename"),
    ("footer", "filename"),
    ("header", "filename"),
    ("facebook", "filename"),
    ("linkedin", "filename"),
    ("instagram", "filename"),
    ("twitter", "filename"),
    ("5000", "size_max"),  # ficheiros < 5KB
]

# Engine assíncrono com pool limitado
engine_options = {
    "echo": settings.DEBUG,
    "pool_pre_ping": True,
}
if settings.DB_POOL_SIZE:
    engine_options["pool_size"] = settings.DB_POOL_SIZE
    engine_options["max_overflow"] = 0

engine = create_async_engine(settings.DATABASE_URL, **engine_options)

if IS_SQLITE:
    # Habilitar foreign keys no SQLite (cascades de projetos e mensagens)
    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

# Session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

# Base para models
Base = declarative_base()


async def get_db() -> AsyncSession:
    """Dependency para injetar sessão do banco"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def ensure_default_records():
    """
    Garante que os registos base existem (idempotente).

    - Projeto "Geral" (fórum global), criado uma única vez
    - Filtros de anexos por omissão, se ainda não houver nenhum
    """
    from digpaper.models import Project, ProjectStatus, EmailFilter

    async with AsyncSessionLocal() as session:
        result = await session.execute(
            select(Project).where(Project.name == GERAL_PROJECT_NAME).limit(1)
        )
        if result.scalar_one_or_none() is None:
            session.add(Project(name=GERAL_PROJECT_NAME, status=ProjectStatus.ACTIVE.value))
            logger.info("Criado projeto especial 'Geral' para o fórum global")

        result = await session.execute(select(func.count()).select_from(EmailFilter))
        if result.scalar_one() == 0:
            for pattern, filter_type in DEFAULT_EMAIL_FILTERS:
                session.add(EmailFilter(pattern=pattern, filter_type=filter_type))
            logger.info(f"Adicionados {len(DEFAULT_EMAIL_FILTERS)} filtros de email por omissão")

        await session.commit()


async def init_db():
    """Inicializa banco de dados (cria tabelas) e garante os registos base"""
    import digpaper.models  # noqa: F401 - regista as tabelas em Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await ensure_default_records()
    logger.info("Database initialized")


async def close_db():
    """Fecha as conexões do pool"""
    await engine.dispose()
