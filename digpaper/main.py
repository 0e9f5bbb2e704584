"""
DigPaper - Main Application
Gestão de documentos de obra: Inbox, email, fórum e notificações
"""
import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from digpaper.core import settings, register_exception_handlers
from digpaper.core.rate_limit import limiter
from digpaper.database import init_db, close_db, AsyncSessionLocal
from digpaper.services import PushService
from digpaper.api import (
    projects_router,
    documents_router,
    email_router,
    forum_router,
    push_router,
    profiles_router
)

# Rate limiting
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle do aplicativo"""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    # Tabelas, obra "Geral" e filtros por omissão
    await init_db()

    # Chaves VAPID (sem elas só as notificações ficam indisponíveis)
    try:
        async with AsyncSessionLocal() as db:
            await PushService(db).init_vapid()
    except Exception as e:
        logger.warning(f"Falha ao inicializar chaves VAPID: {e}")

    if not settings.APP_API_KEY:
        logger.warning("APP_API_KEY não definida - API aberta (modo desenvolvimento)")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_db()


# Middleware de headers de seguranca
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adiciona headers de seguranca em todas as respostas"""
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Sem cache por omissão (a PWA decide o que guardar offline)
        if "cache-control" not in response.headers:
            response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
        return response


# Cria aplicação
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Document management for workshop projects: Inbox, email ingestion and forum",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None
)

# Configura rate limiter na aplicacao
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

register_exception_handlers(app)

# Headers de seguranca (adicionar ANTES do CORS)
app.add_middleware(SecurityHeadersMiddleware)

# CORS (deve vir DEPOIS dos headers de seguranca)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(projects_router, prefix="/api")
app.include_router(documents_router, prefix="/api")
app.include_router(email_router, prefix="/api")
app.include_router(forum_router, prefix="/api")
app.include_router(push_router, prefix="/api")
app.include_router(profiles_router, prefix="/api")

# Ficheiros carregados (fotos, PDFs, áudio)
uploads_dir = str(settings.uploads_path)
os.makedirs(uploads_dir, exist_ok=True)
app.mount("/files", StaticFiles(directory=uploads_dir), name="files")


@app.get("/health")
async def health():
    """Health check"""
    return {"status": "healthy", "version": settings.APP_VERSION}


# Frontend (SPA) servido na raiz, se existir; senão informação do serviço
if os.path.isdir(settings.WEB_DIR):
    app.mount("/", StaticFiles(directory=settings.WEB_DIR, html=True), name="web")
else:
    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "status": "running"
        }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "digpaper.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
