# Configuración de base de datos usando SQLAlchemy.
#
# - DESARROLLO LOCAL: SQLite local (artisan_doors.db) por defecto
# - PRODUCCIÓN: cualquier motor indicado en DATABASE_URL

import logging
import os
import time
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, declarative_base

logger = logging.getLogger(__name__)

backend_dir = Path(__file__).parent.parent
load_dotenv(dotenv_path=backend_dir / ".env")

RECONNECT_DELAY_SECONDS = 5.0

env_database_url = os.getenv("DATABASE_URL", "").strip()

if env_database_url:
    DATABASE_URL = env_database_url
else:
    DATABASE_URL = "sqlite:///./artisan_doors.db"

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    pool_pre_ping=True,
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def is_connected(bind=None) -> bool:
    """Indica si la base de datos responde a una consulta trivial."""
    try:
        with (bind or engine).connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.debug(f"Base de datos no disponible: {e}")
        return False


def connect_with_retry(max_attempts=None, delay: float = RECONNECT_DELAY_SECONDS, bind=None) -> bool:
    """
    Intenta conectar a la base de datos reintentando cada `delay` segundos.

    Con max_attempts=None reintenta indefinidamente, igual que el timer fijo
    de reconexión. Retorna False si se agotaron los intentos.
    """
    attempt = 0
    while True:
        attempt += 1
        if is_connected(bind):
            logger.info("✅ Base de datos conectada correctamente")
            return True

        logger.error(f"❌ Falló la conexión a la base de datos (intento {attempt})")
        if max_attempts is not None and attempt >= max_attempts:
            return False
        time.sleep(delay)


def init_db(bind=None):
    """Crea las tablas en la base de datos si no existen."""
    # Importar modelos para que queden registrados en Base.metadata
    from .models.subscriber import Subscriber  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info(f"Tablas verificadas: {', '.join(Base.metadata.tables.keys())}")


def get_db():
    """
    Dependencia para inyectar la sesión de DB en los endpoints de FastAPI.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
