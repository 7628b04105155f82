"""
Tokens de desuscripción.

El token es el HMAC-SHA256 del email con EMAIL_SECRET como clave. No expira:
el mismo email siempre produce el mismo token mientras no cambie el secreto.
"""
import hashlib
import hmac
import logging
from urllib.parse import quote

from ..config import get_settings

logger = logging.getLogger(__name__)


def generate_unsubscribe_token(email: str) -> str:
    if not isinstance(email, str):
        raise TypeError("Email must be a string")

    secret = get_settings().email_secret
    token = hmac.new(secret.encode("utf-8"), email.encode("utf-8"), hashlib.sha256).hexdigest()
    logger.debug(f"Token generado para {email}")
    return token


def verify_unsubscribe_token(email, token) -> bool:
    """True si el token corresponde al email. Nunca lanza excepciones."""
    if not email or not token or not isinstance(token, str):
        return False
    try:
        expected = generate_unsubscribe_token(email)
    except Exception as e:
        logger.error(f"Error al verificar token de desuscripción: {e}")
        return False
    return hmac.compare_digest(expected.encode("utf-8"), token.strip().lower().encode("utf-8"))


def build_unsubscribe_url(email: str) -> str:
    frontend_url = get_settings().frontend_url
    token = generate_unsubscribe_token(email)
    return f"{frontend_url}/unsubscribe?email={quote(email, safe='')}&token={token}"
