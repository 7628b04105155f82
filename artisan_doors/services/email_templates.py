"""
Plantillas HTML de los emails (bienvenida, cotización, confirmación de baja).
Cada plantilla recibe un dict y devuelve el HTML listo para enviar.
"""
import html
import logging
import secrets
from datetime import datetime

from ..config import get_settings
from ..errors import TemplateDataError
from .style_loader import load_styles

logger = logging.getLogger(__name__)

BRAND_NAME = "Artisan Wooden Doors"
GLOBAL_STYLESHEET = "global.css"


def _e(value) -> str:
    """Escapa un valor para insertarlo en HTML. None se vuelve cadena vacía."""
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def _global_styles() -> str:
    try:
        return load_styles(GLOBAL_STYLESHEET)
    except OSError as e:
        logger.warning(f"⚠️ No se pudieron cargar los estilos globales, se envía sin estilos: {e}")
        return ""


def format_money(value) -> str:
    try:
        return f"{float(value):,.2f}"
    except (TypeError, ValueError):
        return _e(value)


def generate_quote_number(now: datetime = None) -> str:
    now = now or datetime.now()
    return f"{now.year}-{secrets.randbelow(10000):04d}"


def welcome_template(data: dict) -> str:
    if not data or not data.get("email"):
        raise TemplateDataError("Missing required template data")

    frontend_url = get_settings().frontend_url
    first_name = data.get("firstName") or "there"
    products_url = data.get("products") or f"{frontend_url}/products?utm_source=email&utm_medium=welcome"
    unsubscribe_url = data.get("unsubscribeUrl") or f"{frontend_url}/unsubscribe"
    styles = _global_styles()
    year = datetime.now().year

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <style>{styles}</style>
    </head>
    <body>
        <div class="container">
            <div class="header">
                <img src="{_e(frontend_url)}/images/logo.png" alt="{BRAND_NAME}" class="logo">
                <h1>Welcome to {BRAND_NAME}</h1>
            </div>
            <div class="content">
                <h2>Hello {_e(first_name)},</h2>
                <p>We're thrilled to welcome you to our community of design enthusiasts and craftsmanship admirers.</p>

                <div class="features">
                    <p>As a valued subscriber, you'll receive exclusive updates about:</p>
                    <ul>
                        <li>New artisan collections and limited editions</li>
                        <li>Early access to seasonal sales</li>
                        <li>Expert design tips and inspiration</li>
                        <li>Behind-the-scenes craftsmanship stories</li>
                    </ul>
                </div>

                <div class="promo-code">
                    <p>Enjoy a special welcome gift</p>
                    <strong>WELCOME10</strong>
                    <p>for 10% off your first order</p>
                </div>

                <div style="text-align: center;">
                    <a href="{_e(products_url)}" class="button">Explore Our Collection</a>
                </div>
            </div>
            <div class="footer">
                <p>&copy; {year} {BRAND_NAME}</p>
                <p>You're receiving this email because you subscribed to our newsletter.</p>
                <p><a href="{_e(unsubscribe_url)}">Unsubscribe</a> | <a href="{_e(frontend_url)}/privacy">Privacy Policy</a></p>
            </div>
        </div>
    </body>
    </html>"""


def _order_rows(order_summary) -> str:
    rows = ""
    for item in order_summary:
        rows += f"""
                            <tr>
                                <td>{_e(item.get('name'))}</td>
                                <td>{_e(item.get('quantity'))}</td>
                                <td>${format_money(item.get('total'))}</td>
                            </tr>"""
    return rows


def quotation_template(data: dict) -> str:
    form_data = (data or {}).get("formData")
    order_summary = (data or {}).get("orderSummary")
    subtotal = (data or {}).get("subtotal")
    if not form_data or order_summary is None or subtotal is None:
        raise TemplateDataError("Missing required template data")

    frontend_url = get_settings().frontend_url
    styles = _global_styles()
    now = datetime.now()

    installation = form_data.get("installationRequired")
    if isinstance(installation, str):
        installation = installation.strip().lower() in ("yes", "true", "1")
    installation_text = "Yes" if installation else "No"

    notes_html = ""
    if form_data.get("additionalNotes"):
        notes_html = f"""
                    <div class="notes">
                        <span class="label">Additional Requirements</span>
                        <p class="value">{_e(form_data.get('additionalNotes'))}</p>
                    </div>"""

    full_name = f"{_e(form_data.get('firstName'))} {_e(form_data.get('lastName'))}"
    location = f"{_e(form_data.get('city'))}, {_e(form_data.get('state'))} {_e(form_data.get('zipCode'))}"

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
        <style>{styles}</style>
    </head>
    <body>
        <div class="container">
            <div class="header">
                <img src="{_e(frontend_url)}/images/logo.png" alt="{BRAND_NAME}" class="logo">
                <h1>Custom Door Quotation</h1>
            </div>

            <div class="content">
                <div class="quote-header">
                    <h2>Quotation Details</h2>
                    <p class="quote-number">Quote #: {generate_quote_number(now)}</p>
                    <p class="quote-date">Date: {now.strftime('%m/%d/%Y')}</p>
                </div>

                <p>Dear {full_name},</p>
                <p>Thank you for your interest in our custom doors. Here are your quotation details:</p>

                <div class="customer-details">
                    <h3>Customer Information</h3>
                    <div class="detail-grid">
                        <div class="detail-group">
                            <span class="label">Contact Details</span>
                            <span class="value">{full_name}</span>
                            <span class="value">{_e(form_data.get('email'))}</span>
                            <span class="value">{_e(form_data.get('phone'))}</span>
                        </div>
                        <div class="detail-group">
                            <span class="label">Shipping Address</span>
                            <span class="value">{_e(form_data.get('address'))}</span>
                            <span class="value">{location}</span>
                        </div>
                    </div>
                </div>

                <div class="project-details">
                    <h3>Project Specifications</h3>
                    <div class="detail-group">
                        <span class="label">Installation Required</span>
                        <span class="value">{installation_text}</span>
                        <span class="label">Preferred Contact Method</span>
                        <span class="value">{_e(form_data.get('preferredContactMethod'))}</span>
                    </div>{notes_html}
                </div>

                <div class="order-summary">
                    <h3>Order Summary</h3>
                    <table style="width: 100%; border-collapse: collapse;">
                        <thead>
                            <tr>
                                <th>Item Name</th>
                                <th>Quantity</th>
                                <th>Price</th>
                            </tr>
                        </thead>
                        <tbody>{_order_rows(order_summary)}
                        </tbody>
                    </table>
                    <div class="order-total">
                        <span class="label">Subtotal</span>
                        <span class="value">${format_money(subtotal)}</span>
                    </div>
                </div>

                <div class="next-steps">
                    <h3>What's Next?</h3>
                    <ol>
                        <li>Our team will review your requirements</li>
                        <li>We'll prepare a detailed quote within 24-48 hours</li>
                        <li>A design consultant will contact you to discuss options</li>
                        <li>Once approved, we'll begin production</li>
                    </ol>
                </div>
            </div>

            <div class="footer">
                <p>&copy; {now.year} {BRAND_NAME}</p>
                <p>Tel: (555) 123-4567 | Email: sales@artisanwoodendoors.com</p>
                <p class="footer-note">This is a quotation estimate. Final pricing may vary based on specific requirements and customizations.</p>
            </div>
        </div>
    </body>
    </html>"""


def unsubscribe_confirmation_template(data: dict) -> str:
    if not data or not data.get("email"):
        raise TemplateDataError("Missing required template data")

    return f"""
    <div style="font-family: sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2>Unsubscribe Confirmation</h2>
        <p>{_e(data['email'])} has been successfully unsubscribed from our newsletter.</p>
        <p>We're sorry to see you go! If you change your mind, you can always subscribe again from our website.</p>
        <p>Best regards,<br>{BRAND_NAME} Team</p>
    </div>"""
