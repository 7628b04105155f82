import html

import bleach


def sanitize_text(text):
    """
    Limpia texto libre que termina dentro de un email: quita cualquier etiqueta
    HTML y recorta espacios.

    Ejemplos:
    - "  Hola <b>mundo</b> " -> "Hola mundo"
    - "<script>alert(1)</script>Puerta" -> "alert(1)Puerta"
    - "Roble &amp; nogal" -> "Roble & nogal"
    """
    if text is None:
        return None
    if not isinstance(text, str):
        return text
    cleaned = bleach.clean(text, tags=[], attributes={}, strip=True)
    # bleach devuelve HTML escapado; se decodifica una sola vez y las plantillas escapan al renderizar
    return html.unescape(cleaned).strip()
