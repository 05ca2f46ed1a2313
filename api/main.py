"""
API HTTP principal para mop-gen-core.

Esta aplicación FastAPI expone endpoints REST que usan el core interno
(mop_gen_core) para generar, revisar y exportar Methods of Procedure.

Uso:
    uvicorn api.main:app --reload --port 8000
"""

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mop_gen_core import __version__
from mop_gen_core.db.database import init_db
from mop_gen_core.errors import (
    InvalidInput,
    MopGenError,
    NotFound,
    RenderError,
    StorageError,
    UpstreamError,
)

from .routes import documents, mops, reviews

# Cargar variables de entorno
load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Configurar logging
log_level = getattr(logging, LOG_LEVEL, logging.INFO)
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("🚀 API lista")
    yield


app = FastAPI(
    lifespan=lifespan,
    title="MOP Generator API",
    description="API para generar, revisar y exportar Methods of Procedure de equipos de red",
    version=__version__,
)

# CORS
cors_origins_str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001")
cors_origins = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]

logger.info(f"🌐 CORS origins configurados: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Errores de dominio → status HTTP
ERROR_STATUS = {
    NotFound: 404,
    InvalidInput: 400,
    RenderError: 500,
    StorageError: 500,
    UpstreamError: 502,
}


def status_for(exc: MopGenError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return 500


@app.exception_handler(MopGenError)
async def mop_gen_error_handler(request: Request, exc: MopGenError):
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} → {status_code}: {exc}", exc_info=exc)
    else:
        logger.info(f"{request.method} {request.url.path} → {status_code}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"message": str(exc), "error": type(exc).__name__, "retryable": exc.retryable},
    )


# Registrar rutas
app.include_router(documents.router)
app.include_router(mops.router)
app.include_router(reviews.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "mop-gen-core-api"}


@app.get("/health")
@app.get("/api/v1/health")
async def health():
    """Health check detallado."""
    return {
        "status": "ok",
        "service": "mop-gen-core-api",
        "version": __version__,
    }
