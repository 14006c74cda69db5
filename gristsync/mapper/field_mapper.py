"""
Field mapper - turns API records into Grist records.

A mapping list works like a spreadsheet grid: each row pairs one Grist
column with one dotted path into the API record (e.g. "user.profile.email").
"""
from typing import Any, Dict, List, Optional

from gristsync.mapper.mapping import FieldMapping
from gristsync.mapper.serializer import serialize_value
from gristsync.transformer.registry import TransformerRegistry


def get_nested_value(record: Any, path: str) -> Any:
    """
    Read a value from a record using dot notation.

    Args:
        record: Source record
        path: Dotted path (e.g. "user.name"); list items are addressed by index

    Returns:
        The value found, or None if any step of the path is missing

    Example:
        get_nested_value({"user": {"name": "Alice"}}, "user.name")  # "Alice"
    """
    if not path or not record:
        return None

    current = record
    for key in path.split("."):
        if current is None:
            return None
        if isinstance(current, dict):
            current = current.get(key)
        elif isinstance(current, (list, tuple)) and key.isdigit():
            index = int(key)
            current = current[index] if index < len(current) else None
        else:
            return None

    return current


def _apply_transform(value: Any, mapping: FieldMapping, registry: TransformerRegistry) -> Any:
    if callable(mapping.transform):
        return mapping.transform(value)
    if isinstance(mapping.transform, str) and mapping.transform:
        return registry.transform(value, mapping.transform)
    return serialize_value(value)


def transform_record(
    record: Any,
    mappings: List[FieldMapping],
    registry: Optional[TransformerRegistry] = None,
) -> Dict[str, Any]:
    """
    Transform one API record into a Grist record.

    Args:
        record: A record returned by the source API
        mappings: Mappings to apply; invalid or disabled ones are skipped
        registry: Registry resolving named transforms

    Returns:
        {grist_column: value}; a repeated column keeps the last mapping's value

    Example:
        transform_record(
            {"id": 1, "user": {"name": "Alice"}, "email": "alice@example.com"},
            [FieldMapping("Name", "user.name"), FieldMapping("Email", "email")],
        )
        # {"Name": "Alice", "Email": "alice@example.com"}
    """
    registry = registry or TransformerRegistry()
    grist_record: Dict[str, Any] = {}

    for mapping in mappings:
        if not mapping.grist_column or not mapping.api_field:
            continue
        if mapping.enabled is False:
            continue

        value = get_nested_value(record, mapping.api_field)
        grist_record[mapping.grist_column] = _apply_transform(value, mapping, registry)

    return grist_record


def transform_records(
    records: Any,
    mappings: List[FieldMapping],
    registry: Optional[TransformerRegistry] = None,
) -> List[Dict[str, Any]]:
    """Transform a list of API records. Anything other than a list gives []."""
    if not isinstance(records, (list, tuple)):
        return []

    registry = registry or TransformerRegistry()
    return [transform_record(record, mappings, registry) for record in records]


def is_valid_mapping(mapping: FieldMapping) -> bool:
    """A mapping is valid when both the column and the field are set."""
    return bool(mapping.grist_column and mapping.api_field)


def get_valid_mappings(mappings: List[FieldMapping]) -> List[FieldMapping]:
    """Keep valid mappings, enabled or not."""
    return [m for m in mappings if is_valid_mapping(m)]


def extract_all_keys(record: Any, prefix: str = "", max_depth: int = 5) -> List[str]:
    """
    List every key path of a record, nested ones included.

    Lists are leaves; only dict values are walked into, up to max_depth levels.

    Example:
        extract_all_keys({"user": {"name": "Alice", "profile": {"age": 30}}, "email": "a@x.com"})
        # ["user", "user.name", "user.profile", "user.profile.age", "email"]
    """
    if not isinstance(record, dict) or max_depth <= 0:
        return []

    keys: List[str] = []
    for key, value in record.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        keys.append(path)

        if isinstance(value, dict):
            keys.extend(extract_all_keys(value, path, max_depth - 1))

    return keys
