import os
import warnings


DEFAULT_EMAIL_SECRET = "default-secret-key"

# Variables sin las cuales el servicio no puede enviar correos ni armar links
REQUIRED_ENV_VARS = [
    "EMAIL_USER",
    "EMAIL_PASS",
    "FRONTEND_URL",
]


class ConfigurationError(RuntimeError):
    """Falta configuración obligatoria en el entorno."""


class Settings:
    """Configuración de la aplicación que lee variables de entorno dinámicamente."""

    @property
    def app_name(self) -> str:
        return "Artisan Wooden Doors API"

    @property
    def environment(self) -> str:
        env = os.getenv("ENV", "").lower()
        # Si está desplegado (tiene PORT) o ENV=production, es producción
        if env == "production" or os.getenv("PORT"):
            return "production"
        return "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def frontend_url(self) -> str:
        return os.getenv("FRONTEND_URL", "http://localhost:5173").rstrip("/")

    @property
    def database_url(self) -> str:
        return os.getenv("DATABASE_URL", "").strip()

    @property
    def email_user(self) -> str:
        return os.getenv("EMAIL_USER", "")

    @property
    def email_pass(self) -> str:
        return os.getenv("EMAIL_PASS", "")

    @property
    def email_secret(self) -> str:
        secret = os.getenv("EMAIL_SECRET")
        if not secret:
            warnings.warn(
                "EMAIL_SECRET not set! Using insecure default - DO NOT USE IN PRODUCTION",
                RuntimeWarning,
                stacklevel=2,
            )
            return DEFAULT_EMAIL_SECRET
        return secret

    @property
    def smtp_host(self) -> str:
        return os.getenv("SMTP_HOST", "smtp.gmail.com")

    @property
    def smtp_port(self) -> int:
        return int(os.getenv("SMTP_PORT", "465"))

    @property
    def resend_api_key(self) -> str:
        return os.getenv("RESEND_API_KEY", "")

    @property
    def email_from_name(self) -> str:
        return os.getenv("EMAIL_FROM_NAME", "Artisan Wooden Doors")

    @property
    def email_from_address(self) -> str:
        return os.getenv("EMAIL_FROM_ADDRESS") or self.email_user or "noreply@artisanwoodendoors.com"

    @property
    def rate_limit_window_ms(self) -> int:
        return int(os.getenv("RATE_LIMIT_WINDOW_MS") or 900000)  # 15 minutos

    @property
    def rate_limit_max_requests(self) -> int:
        return int(os.getenv("RATE_LIMIT_MAX_REQUESTS") or 5)

    @property
    def trust_proxy(self) -> bool:
        # Sólo activar detrás de un proxy que reescriba X-Forwarded-For
        return os.getenv("TRUST_PROXY", "").strip().lower() in ("1", "true", "yes")

    @property
    def log_file(self) -> str:
        return os.getenv("LOG_FILE", "combined.log")


# Instancia singleton de Settings (sin cache, lee valores dinámicamente)
_settings_instance = None


def get_settings() -> Settings:
    """Retorna la instancia de Settings. Lee variables de entorno dinámicamente."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def clear_settings_cache():
    """Limpia la instancia de settings."""
    global _settings_instance
    _settings_instance = None


def missing_env_vars() -> list:
    return [key for key in REQUIRED_ENV_VARS if not os.getenv(key)]


def check_environment():
    """
    Verifica que estén definidas todas las variables obligatorias.

    Raises:
        ConfigurationError: con la lista completa de variables faltantes.
    """
    missing = missing_env_vars()
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )
