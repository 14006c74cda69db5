"""Transformer registry."""
import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional

from gristsync.mapper.serializer import serialize_value, to_json

logger = logging.getLogger(__name__)

TRUE_STRINGS = {"true", "1", "yes", "y", "on", "oui"}
FALSE_STRINGS = {"false", "0", "no", "n", "off", "non", ""}


class TransformerRegistry:
    """Registry of named value transformers usable from a mapping."""

    DEFAULT = "NONE"

    def __init__(self):
        """Initialize registry."""
        self.transformers: Dict[str, Callable[..., Any]] = {
            "NONE": lambda x, **kw: serialize_value(x),
            "STRING": lambda x, **kw: None if x is None else str(serialize_value(x)),
            "UPPERCASE": lambda x, **kw: str(serialize_value(x)).upper() if x is not None else x,
            "LOWERCASE": lambda x, **kw: str(serialize_value(x)).lower() if x is not None else x,
            "TRIM": lambda x, **kw: str(serialize_value(x)).strip() if x is not None else x,
            "INTEGER": self._to_integer,
            "FLOAT": self._to_float,
            "BOOLEAN": self._to_boolean,
            "JSON": lambda x, **kw: to_json(x),
            "DATE": self._format_date,
        }

    def names(self):
        """Registered transformer names."""
        return sorted(self.transformers)

    def has(self, name: str) -> bool:
        return name.upper() in self.transformers

    def get(self, name: Optional[str]) -> Callable[..., Any]:
        """Get transformer by name, falling back to plain serialization."""
        if not name:
            return self.transformers[self.DEFAULT]
        transformer = self.transformers.get(name.upper())
        if transformer is None:
            logger.warning(f"Unknown transformer '{name}', using default serialization")
            return self.transformers[self.DEFAULT]
        return transformer

    def register(self, name: str, transformer: Callable[..., Any]) -> None:
        """Register a custom named transformer."""
        self.transformers[name.upper()] = transformer

    def transform(self, value: Any, transformer_name: Optional[str], **config) -> Any:
        """Apply transformation."""
        transformer = self.get(transformer_name)
        return transformer(value, **config)

    @staticmethod
    def _to_integer(value: Any, **config) -> Any:
        """Convert to int."""
        if value is None or isinstance(value, bool):
            return value
        try:
            return int(float(str(value).strip()))
        except (TypeError, ValueError, OverflowError):
            return serialize_value(value)

    @staticmethod
    def _to_float(value: Any, **config) -> Any:
        """Convert to float."""
        if value is None or isinstance(value, bool):
            return value
        try:
            return float(str(value).strip())
        except (TypeError, ValueError, OverflowError):
            return serialize_value(value)

    @staticmethod
    def _to_boolean(value: Any, **config) -> Any:
        """Convert to bool."""
        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value != 0
        text = str(value).strip().lower()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
        return serialize_value(value)

    @staticmethod
    def _format_date(value: Any, **config) -> Any:
        """Format date."""
        if value is None:
            return value

        date_format = config.get("format", "%Y-%m-%d")

        if isinstance(value, (date, datetime)):
            return value.strftime(date_format)

        try:
            parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            return serialize_value(value)
        return parsed.strftime(date_format)

