import logging
from pathlib import Path

logger = logging.getLogger(__name__)

STYLES_DIR = Path(__file__).resolve().parent.parent / "styles"


def load_styles(filename: str) -> str:
    """Lee una hoja de estilos de artisan_doors/styles para incrustarla en los emails."""
    styles_path = STYLES_DIR / filename
    try:
        css = styles_path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"❌ Error al cargar estilos desde {filename}: {e}")
        raise
    logger.info(f"Estilos cargados desde {filename}")
    return css
