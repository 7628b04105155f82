"""
Servicio de Email: SMTP (Gmail por defecto) o Resend como alternativa.

Se usa SMTP cuando EMAIL_USER y EMAIL_PASS están configurados; si sólo hay
RESEND_API_KEY se envía por la API de Resend.
"""
import asyncio
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import List, Optional, Union

import resend

from ..config import get_settings
from ..errors import EmailDeliveryError
from .template_manager import template_manager
from .token_service import build_unsubscribe_url

logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 30


def _smtp_configured() -> bool:
    settings = get_settings()
    return bool(settings.email_user and settings.email_pass)


def _resend_configured() -> bool:
    return bool(get_settings().resend_api_key)


def get_transport() -> Optional[str]:
    if _smtp_configured():
        return "smtp"
    if _resend_configured():
        return "resend"
    return None


def is_email_service_configured() -> bool:
    return get_transport() is not None


def get_email_config_info() -> dict:
    """Información de configuración del email (sin secretos) para /api/health."""
    settings = get_settings()
    return {
        "transport": get_transport(),
        "user": settings.email_user or None,
        "host": settings.smtp_host,
        "port": settings.smtp_port,
        "configured": is_email_service_configured(),
    }


def _open_smtp_connection() -> smtplib.SMTP:
    settings = get_settings()
    context = ssl.create_default_context()
    if settings.smtp_port == 465:
        server = smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, context=context, timeout=SMTP_TIMEOUT_SECONDS)
    else:
        server = smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=SMTP_TIMEOUT_SECONDS)
        server.starttls(context=context)
    server.login(settings.email_user, settings.email_pass)
    return server


def verify_transporter() -> bool:
    """Verifica la conexión con el servidor de correo al iniciar. Nunca lanza."""
    transport = get_transport()
    if transport is None:
        logger.warning("⚠️ Servicio de email no configurado (EMAIL_USER/EMAIL_PASS o RESEND_API_KEY)")
        return False
    if transport == "resend":
        logger.info("📧 Emails se enviarán vía Resend")
        return True

    try:
        server = _open_smtp_connection()
        server.quit()
    except Exception as e:
        settings = get_settings()
        logger.error(
            f"❌ Error de configuración de email: {e} "
            f"(user={settings.email_user}, passLength={len(settings.email_pass)})"
        )
        return False

    logger.info("✅ Servidor de email listo para enviar mensajes")
    return True


def _send_via_smtp(recipients: List[str], subject: str, html: Optional[str], text: Optional[str],
                   sender: str, reply_to: Optional[str]):
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = sender
    msg["To"] = ", ".join(recipients)
    if reply_to:
        msg["Reply-To"] = reply_to
    if text:
        msg.attach(MIMEText(text, "plain", "utf-8"))
    if html:
        msg.attach(MIMEText(html, "html", "utf-8"))

    server = _open_smtp_connection()
    try:
        server.sendmail(get_settings().email_user, recipients, msg.as_string())
    finally:
        server.quit()


def _send_via_resend(recipients: List[str], subject: str, html: Optional[str], text: Optional[str],
                     sender: str, reply_to: Optional[str]) -> dict:
    resend.api_key = get_settings().resend_api_key
    params = {
        "from": sender,
        "to": recipients,
        "subject": subject,
    }
    if html:
        params["html"] = html
    if text:
        params["text"] = text
    if reply_to:
        params["reply_to"] = [reply_to]
    return resend.Emails.send(params)


def send_email(
    to: Union[str, List[str]],
    subject: str,
    html: Optional[str] = None,
    text: Optional[str] = None,
    from_name: Optional[str] = None,
    from_address: Optional[str] = None,
    reply_to: Optional[str] = None,
):
    """
    Envía un email por el transporte configurado.

    Raises:
        EmailDeliveryError: si no hay transporte configurado o el envío falla.
    """
    settings = get_settings()
    recipients = [to] if isinstance(to, str) else list(to)
    sender = formataddr((from_name or settings.email_from_name, from_address or settings.email_from_address))

    transport = get_transport()
    if transport is None:
        logger.error("❌ No hay servicio de email configurado")
        raise EmailDeliveryError("Email service not configured")

    try:
        if transport == "smtp":
            _send_via_smtp(recipients, subject, html, text, sender, reply_to)
            logger.info(f"✅ Email enviado vía SMTP a {', '.join(recipients)}")
        else:
            response = _send_via_resend(recipients, subject, html, text, sender, reply_to)
            logger.info(f"✅ Email enviado vía Resend a {', '.join(recipients)}. ID: {response.get('id', 'N/A')}")
    except Exception as e:
        logger.error(f"❌ Error al enviar email a {recipients}: {e}", exc_info=True)
        raise EmailDeliveryError(f"Failed to send email: {e}") from e


async def send_welcome_email(email: str, first_name: Optional[str] = None) -> bool:
    """
    Envía el email de bienvenida con los links a productos y de desuscripción.

    Returns:
        bool: True si el email se envió correctamente, False en caso contrario
    """
    frontend_url = get_settings().frontend_url
    try:
        html = template_manager.render("welcome", {
            "email": email,
            "firstName": first_name,
            "products": f"{frontend_url}/products?utm_source=email&utm_medium=welcome",
            "unsubscribeUrl": build_unsubscribe_url(email),
        })
        # smtplib bloquea: se envía en un thread para no frenar el event loop
        await asyncio.to_thread(
            send_email,
            to=email,
            subject="Welcome to Artisan Wooden Doors Newsletter! 🎉",
            html=html,
        )
        return True
    except Exception as e:
        logger.error(f"Error al enviar email de bienvenida a {email}: {e}")
        return False


async def send_unsubscribe_confirmation(email: str) -> bool:
    try:
        html = template_manager.render("unsubscribe_confirmation", {"email": email})
        await asyncio.to_thread(send_email, to=email, subject="Unsubscribe Confirmation", html=html)
        return True
    except Exception as e:
        logger.error(f"Error al enviar confirmación de baja a {email}: {e}")
        return False


async def send_contact_email(form_data: dict) -> bool:
    """
    Reenvía el formulario de contacto a la casilla de la tienda.
    Usa el correo del cliente como Reply-To para poder responderle directo.
    """
    shop_mailbox = get_settings().email_user
    if not shop_mailbox:
        logger.warning("EMAIL_USER no configurado, no hay casilla para recibir contactos")
        return False

    name = form_data.get("name", "").strip()
    email = form_data.get("email", "").strip()
    phone = form_data.get("phone") or "not provided"
    message = form_data.get("message", "").strip()

    text = f"You have a new message from {name} ({email}, {phone}):\n\n{message}"

    try:
        await asyncio.to_thread(
            send_email,
            to=shop_mailbox,
            subject=form_data.get("subject") or "New Contact Form Submission",
            text=text,
            from_name=name,
            reply_to=email,
        )
        return True
    except EmailDeliveryError as e:
        logger.error(f"Error al enviar email de contacto: {e}")
        return False


async def send_quotation_email(payload: dict) -> bool:
    """Renderiza la cotización y la envía al cliente que la pidió."""
    form_data = payload.get("formData") or {}
    try:
        html = template_manager.render("quotation", {
            "formData": form_data,
            "orderSummary": payload.get("orderSummary") or [],
            "subtotal": payload.get("subtotal"),
        })
        await asyncio.to_thread(
            send_email,
            to=form_data.get("email"),
            subject="Your Quotation Request - Artisan Wooden Doors",
            html=html,
        )
        return True
    except Exception as e:
        logger.error(f"Error al enviar cotización: {e}", exc_info=True)
        return False
