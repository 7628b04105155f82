"""
Rate limiting en memoria por IP (ventana fija).

Suficiente para un único proceso; cada instancia lleva su propio contador.
"""
import logging
import time
from threading import Lock

from fastapi import HTTPException, Request, status

from ..config import get_settings

logger = logging.getLogger(__name__)

# Cada cuánto se barren las ventanas vencidas (segundos)
CLEANUP_INTERVAL_SECONDS = 60


def get_client_ip(request: Request) -> str:
    """IP del cliente. X-Forwarded-For sólo se usa con TRUST_PROXY activo."""
    if get_settings().trust_proxy:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimiter:
    """Dependencia de FastAPI: `Depends(limiter)` corta con 429 al superar el límite."""

    def __init__(self, max_requests: int, window_seconds: float, message: str, name: str = "default"):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.message = message
        self.name = name
        # {ip: {"count": int, "reset_time": float}}
        self._hits = {}
        self._lock = Lock()
        self._last_cleanup = time.monotonic()

    def cleanup_expired(self, now: float = None):
        """Elimina las entradas cuya ventana ya venció."""
        now = time.monotonic() if now is None else now
        with self._lock:
            expired_keys = [k for k, v in self._hits.items() if now >= v["reset_time"]]
            for k in expired_keys:
                del self._hits[k]
            self._last_cleanup = now

        if expired_keys:
            logger.debug(f"🧹 Rate limit '{self.name}': {len(expired_keys)} entradas vencidas eliminadas")

    def hit(self, key: str) -> bool:
        """Registra un request. Retorna False si el cliente ya agotó su ventana."""
        now = time.monotonic()
        if now - self._last_cleanup >= CLEANUP_INTERVAL_SECONDS:
            self.cleanup_expired(now)

        with self._lock:
            entry = self._hits.get(key)
            if entry is None or now >= entry["reset_time"]:
                entry = {"count": 0, "reset_time": now + self.window_seconds}
                self._hits[key] = entry
            entry["count"] += 1
            return entry["count"] <= self.max_requests

    @property
    def tracked_clients(self) -> int:
        return len(self._hits)

    def reset(self):
        with self._lock:
            self._hits.clear()

    def __call__(self, request: Request):
        ip = get_client_ip(request)
        if not self.hit(ip):
            logger.warning(f"🚫 Rate limit '{self.name}' excedido para {ip}")
            raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=self.message)


_settings = get_settings()

subscription_limiter = RateLimiter(
    max_requests=_settings.rate_limit_max_requests,
    window_seconds=_settings.rate_limit_window_ms / 1000,
    message="Too many subscription attempts. Please try again later.",
    name="subscription",
)

contact_form_limiter = RateLimiter(
    max_requests=10,
    window_seconds=60 * 60,
    message="Too many contact form submissions. Please try again later.",
    name="contact",
)
