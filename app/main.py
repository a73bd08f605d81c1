import os
import logging
from fastapi import FastAPI, HTTPException, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.core.exception_handlers import (
    validation_exception_handler,
    http_exception_handler,
    general_exception_handler
)
from app.config.settings import CORS_ORIGINS, CORS_ALLOW_ALL, BASE_URL as SETTINGS_BASE_URL, ENABLE_DOCS, SCHEDULER_ENABLED
from app.utils.prometheus_metrics import PrometheusMiddleware, get_metrics, CONTENT_TYPE_LATEST

# ───────────────────────────
# Importar modelos antes das rotas
# ───────────────────────────
from app.api.notifications.router.router import router as notifications_router
from app.api.billing.router.router_billing import router as billing_router

logger = logging.getLogger(__name__)

BASE_URL = SETTINGS_BASE_URL or os.getenv("BASE_URL", "http://localhost:8000")

# ──────────────────────────
# Instância FastAPI
# ──────────────────────────
app = FastAPI(
    title="Rental Billing API",
    version="1.0.0",
    description="Cronograma de parcelas de aluguel e lembretes de cobrança",
    docs_url=("/swagger" if ENABLE_DOCS else None),
    redoc_url=("/redoc" if ENABLE_DOCS else None),
    openapi_url=("/openapi.json" if ENABLE_DOCS else None),
    servers=[{"url": BASE_URL, "description": "Base URL do ambiente"}],
    redirect_slashes=False  # Evita redirecionamento 307 quando URL não termina com /
)

# ───────────────────────────
# Exception Handlers Globais
# ───────────────────────────
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# ───────────────────────────
# Middlewares
# ───────────────────────────
# Middlewares são executados na ORDEM REVERSA da adição (último adicionado = primeiro executado)
app.add_middleware(PrometheusMiddleware)

# - Se CORS_ALLOW_ALL=true => allow_origins=["*"], allow_credentials=False
# - Caso contrário => allow_origins=CORS_ORIGINS (se vazio cai para ["*"])
if CORS_ALLOW_ALL:
    allowed_origins = ["*"]
    allow_credentials = False
else:
    allowed_origins = CORS_ORIGINS or ["*"]
    allow_credentials = bool(CORS_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ───────────────────────────
# Startup
# ───────────────────────────
@app.on_event("startup")
async def startup():
    from app.database.init_db import inicializar_banco
    from app.api.notifications.workers.reminder_scheduler import ReminderScheduler

    logger.info("Iniciando API e banco de dados...")
    inicializar_banco()

    if SCHEDULER_ENABLED:
        try:
            scheduler = ReminderScheduler()
            scheduler.start()
            app.state.reminder_scheduler = scheduler
            logger.info("Agendador de lembretes inicializado com sucesso.")
        except Exception as e:
            logger.error(f"Erro ao inicializar agendador de lembretes: {e}")
    else:
        logger.info("Agendador desabilitado (SCHEDULER_ENABLED=false); apenas gatilhos manuais.")

    logger.info("API iniciada com sucesso.")

# ───────────────────────────
# Shutdown
# ───────────────────────────
@app.on_event("shutdown")
async def shutdown():
    logger.info("Encerrando API...")
    scheduler = getattr(app.state, "reminder_scheduler", None)
    if scheduler is not None:
        scheduler.stop()
    logger.info("API encerrada.")

# ───────────────────────────
# Rotas
# ───────────────────────────

@app.get("/")
async def root():
    return {"status": "ok", "message": "API is running"}

@app.get("/health")
async def health():
    return {"status": "healthy"}

@app.get("/metrics", include_in_schema=False)
async def metrics():
    """Métricas no formato Prometheus"""
    return Response(content=get_metrics(), media_type=CONTENT_TYPE_LATEST)

# ───────────────────────────
# Routers
# ───────────────────────────
app.include_router(notifications_router)
app.include_router(billing_router)
