import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

# Cargar variables de entorno desde .env (solo en desarrollo local)
backend_dir = Path(__file__).parent.parent
env_path = backend_dir / ".env"
loaded = load_dotenv(dotenv_path=env_path)

from .config import ConfigurationError, check_environment, clear_settings_cache, get_settings  # noqa: E402
from .database import connect_with_retry, init_db, is_connected  # noqa: E402
from .errors import AppError  # noqa: E402
from .routers import contact, newsletter, quotation, unsubscribe  # noqa: E402
from .security_headers import SecurityHeadersMiddleware  # noqa: E402
from .services.email_service import get_email_config_info, verify_transporter  # noqa: E402

clear_settings_cache()
app_settings = get_settings()


def configure_logging(log_file: str = None):
    """Consola + archivo (LOG_FILE, combined.log por defecto)."""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
    )


configure_logging(app_settings.log_file)
logger = logging.getLogger(__name__)

if loaded:
    logger.info(f"Variables de entorno cargadas desde: {env_path}")
else:
    logger.warning(f"No se pudo cargar archivo .env desde: {env_path}")

DB_CONNECT_ATTEMPTS = 5


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        check_environment()
    except ConfigurationError as e:
        if app_settings.is_production:
            logger.error(f"❌ {e}")
            raise
        logger.warning(f"⚠️ {e}")

    # No bloquear el inicio si la base no responde
    if connect_with_retry(max_attempts=DB_CONNECT_ATTEMPTS):
        try:
            init_db()
        except Exception as e:
            logger.error(f"❌ Error al crear tablas al iniciar: {e}", exc_info=True)
    else:
        logger.warning("⚠️ El servidor continuará iniciando, pero la base de datos no está disponible")

    verify_transporter()
    logger.info(f"🚀 {app_settings.app_name} iniciado ({app_settings.environment})")
    yield


app = FastAPI(title="Artisan Wooden Doors API", version="0.1.0", redirect_slashes=False, lifespan=lifespan)

allowed_origins = [app_settings.frontend_url]
logger.info(f"🌐 Orígenes CORS permitidos: {allowed_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SecurityHeadersMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    logger.error(f"Error: {exc.message} ({request.method} {request.url.path})")
    return JSONResponse(status_code=exc.status_code, content={"status": "error", "message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "msg": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"❌ Error no controlado en {request.method} {request.url.path}: {exc}", exc_info=True)
    # No filtrar detalles internos en producción
    message = "Something went wrong" if get_settings().is_production else str(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"status": "error", "message": message},
    )


# Include routers
app.include_router(newsletter.router, prefix="/api")
app.include_router(unsubscribe.router, prefix="/api")
app.include_router(contact.router, prefix="/api")
app.include_router(quotation.router, prefix="/api")


@app.get("/", tags=["root"])
async def root():
    return {"message": "Artisan Wooden Doors API"}


@app.get("/api/health", tags=["health"])
async def health():
    return {
        "status": "ok",
        "emailConfig": get_email_config_info(),
        "database": "connected" if is_connected() else "disconnected",
    }


@app.get("/favicon.ico", tags=["static"])
async def favicon():
    return Response(status_code=204)
