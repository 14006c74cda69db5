"""Heuristics for auto-generating mappings from a sample API record."""
from difflib import SequenceMatcher
from typing import Any, List, Tuple

from gristsync.mapper.field_mapper import extract_all_keys
from gristsync.mapper.mapping import FieldMapping

# API key names that clash with Grist's reserved columns or that keep their name
RESERVED_COLUMN_MAPPINGS = {
    "id": "api_id",
    "createdAt": "createdAt",
    "updatedAt": "updatedAt",
}


def column_name_for_path(api_field: str) -> str:
    """
    Derive a Grist column name from a dotted API path.

    The leaf key is looked up in RESERVED_COLUMN_MAPPINGS first; otherwise
    every "." becomes "_" ("user.email" -> "user_email").
    """
    leaf = api_field.rsplit(".", 1)[-1]
    if leaf in RESERVED_COLUMN_MAPPINGS:
        return RESERVED_COLUMN_MAPPINGS[leaf]
    return api_field.replace(".", "_")


def generate_mappings_from_api_data(sample: Any, default_enabled: bool = True) -> List[FieldMapping]:
    """
    Generate one mapping per key path of a sample API record.

    Args:
        sample: A record returned by the source API
        default_enabled: Whether generated mappings start enabled

    Returns:
        List of mappings, in key discovery order

    Example:
        generate_mappings_from_api_data({"id": 1, "name": "Alice", "user": {"email": "a@x.com"}})
        # [FieldMapping("api_id", "id"), FieldMapping("name", "name"),
        #  FieldMapping("user", "user"), FieldMapping("user_email", "user.email")]
    """
    if not isinstance(sample, dict):
        return []

    return [
        FieldMapping(
            grist_column=column_name_for_path(api_field),
            api_field=api_field,
            enabled=default_enabled,
        )
        for api_field in extract_all_keys(sample)
    ]


def suggest_api_fields(query: str, sample: Any, limit: int = 5, min_ratio: float = 0.6) -> List[str]:
    """
    Suggest API field paths for a partially typed field name.

    Prefix matches rank first, then substring matches, then fuzzy matches
    above min_ratio. An empty query lists the first `limit` paths.
    """
    paths = extract_all_keys(sample)
    if not query:
        return paths[:limit]

    query_lower = query.lower().strip()
    scored: List[Tuple[int, float, int, str]] = []

    for position, path in enumerate(paths):
        path_lower = path.lower()
        if path_lower.startswith(query_lower):
            scored.append((0, 1.0, position, path))
        elif query_lower in path_lower:
            scored.append((1, 1.0, position, path))
        else:
            ratio = SequenceMatcher(None, query_lower, path_lower).ratio()
            if ratio >= min_ratio:
                scored.append((2, -ratio, position, path))

    scored.sort()
    return [path for _, _, _, path in scored[:limit]]
