import copy
import json
import logging
from collections import OrderedDict

from ..errors import TemplateDataError, TemplateNotFoundError
from .email_templates import (
    quotation_template,
    unsubscribe_confirmation_template,
    welcome_template,
)

logger = logging.getLogger(__name__)

# Campos obligatorios por tipo de plantilla. En "quotation" se buscan dentro de formData.
REQUIRED_FIELDS = {
    "welcome": ["email"],
    "quotation": ["email", "firstName", "lastName"],
}


class EmailTemplateManager:
    """
    Registro de plantillas con cache de renders.

    La clave de cache es el tipo más el JSON (con claves ordenadas) de los datos,
    así dos renders con los mismos datos devuelven el mismo HTML.
    """

    def __init__(self, max_entries: int = 256):
        self.templates = {
            "welcome": welcome_template,
            "quotation": quotation_template,
            "unsubscribe_confirmation": unsubscribe_confirmation_template,
        }
        self.max_entries = max_entries
        self.cache = OrderedDict()

    @property
    def cache_size(self) -> int:
        return len(self.cache)

    def validate_template_data(self, template_type: str, data: dict) -> bool:
        fields = REQUIRED_FIELDS.get(template_type)
        if not fields:
            return True

        if template_type == "quotation":
            source = data.get("formData") or {}
        else:
            source = data

        missing = [field for field in fields if not source.get(field)]
        if missing:
            raise TemplateDataError(
                f"Missing required fields for {template_type}: {', '.join(missing)}"
            )
        return True

    @staticmethod
    def _cache_key(template_type: str, data: dict) -> str:
        return f"{template_type}-{json.dumps(data, sort_keys=True, default=str)}"

    def render(self, template_type: str, data: dict) -> str:
        template = self.templates.get(template_type)
        if template is None:
            logger.error(f"❌ Plantilla '{template_type}' no encontrada")
            raise TemplateNotFoundError(template_type)

        # Copia para no modificar los datos del llamador
        template_data = copy.deepcopy(data or {})
        self.validate_template_data(template_type, template_data)

        cache_key = self._cache_key(template_type, template_data)
        if cache_key in self.cache:
            logger.info(f"Usando plantilla cacheada para {template_type}")
            self.cache.move_to_end(cache_key)
            return self.cache[cache_key]

        try:
            rendered = template(template_data)
        except Exception as e:
            logger.error(f"❌ Error al renderizar plantilla {template_type}: {e}", exc_info=True)
            raise

        self.cache[cache_key] = rendered
        if len(self.cache) > self.max_entries:
            self.cache.popitem(last=False)
        return rendered

    def clear_cache(self):
        self.cache.clear()
        logger.info("Cache de plantillas limpiada")


template_manager = EmailTemplateManager()
