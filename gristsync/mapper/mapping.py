"""Field mapping model."""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

# None (serialize), a registered transformer name, or a callable
Transform = Union[None, str, Callable[[Any], Any]]


@dataclass
class FieldMapping:
    """Maps one dotted API field path to one Grist column."""

    grist_column: str
    api_field: str
    enabled: bool = True
    transform: Transform = None

    def is_valid(self) -> bool:
        """Both sides of the mapping are filled in."""
        return bool(self.grist_column and self.api_field)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary. Callable transforms are not serializable."""
        return {
            "grist_column": self.grist_column,
            "api_field": self.api_field,
            "enabled": self.enabled,
            "transform": self.transform if isinstance(self.transform, str) else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldMapping":
        """Build a mapping from a dictionary."""
        transform: Optional[str] = data.get("transform") or None
        return cls(
            grist_column=data.get("grist_column", "") or "",
            api_field=data.get("api_field", "") or "",
            enabled=data.get("enabled", True) is not False,
            transform=transform,
        )
