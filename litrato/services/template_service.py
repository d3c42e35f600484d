# litrato/services/template_service.py
"""
Jinja2 rendering for customer emails.

Templates live under ``litrato/templates``; every render gets the common
context (brand name, year, support address) merged under the caller's.
"""

from datetime import date, datetime
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, TemplateNotFound
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import BRAND_NAME
from ..utils.time_utils import format_minutes, time_to_minutes
from .base import BaseService

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


class TemplateService(BaseService):
    """Loads templates from the package and renders them with autoescaping on."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._register_custom_filters()

    def _register_custom_filters(self) -> None:
        def format_date(value: Any, format_str: str = "%B %d, %Y") -> str:
            if isinstance(value, (date, datetime)):
                return value.strftime(format_str)
            return str(value)

        def clock(value: Any) -> str:
            """24-hour HH:MM for a ``time``."""
            return format_minutes(time_to_minutes(value))

        self.env.filters["format_date"] = format_date
        self.env.filters["clock"] = clock

    def get_common_context(self) -> Dict[str, Any]:
        return {
            "brand_name": BRAND_NAME,
            "current_year": datetime.now().year,
            "support_email": settings.from_email,
        }

    @BaseService.measure_operation("render_template")
    def render_template(self, template_name: str, context: Optional[Dict[str, Any]] = None, **kwargs) -> str:
        """
        Render ``template_name`` (relative to the templates directory).

        Raises:
            TemplateNotFound: If the template does not exist
        """
        full_context = self.get_common_context()
        if context:
            full_context.update(context)
        full_context.update(kwargs)
        try:
            return self.env.get_template(template_name).render(full_context)
        except TemplateNotFound:
            self.logger.error(f"Template not found: {template_name}")
            raise

    def template_exists(self, template_name: str) -> bool:
        try:
            self.env.get_template(template_name)
            return True
        except TemplateNotFound:
            return False
