"""Sync API records into a Grist table."""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from gristsync.api.grist_client import GristClient
from gristsync.errors.exceptions import EmptyRecordsError
from gristsync.mapper.field_mapper import get_valid_mappings, transform_records
from gristsync.mapper.mapping import FieldMapping
from gristsync.transformer.registry import TransformerRegistry

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of one sync run."""

    source_count: int
    inserted_ids: List[int] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)

    @property
    def inserted_count(self) -> int:
        return len(self.inserted_ids)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "source_count": self.source_count,
            "inserted_count": self.inserted_count,
            "inserted_ids": self.inserted_ids,
            "columns": self.columns,
        }


class DataImporter:
    """Map API records and push them into Grist."""

    def __init__(self, grist_client: GristClient, registry: Optional[TransformerRegistry] = None):
        """
        Initialize importer.

        Args:
            grist_client: GristClient instance
            registry: Registry resolving named transforms
        """
        self.grist_client = grist_client
        self.registry = registry or TransformerRegistry()

    def preview(self, api_records: List[Any], mappings: List[FieldMapping], limit: int = 5) -> List[Dict[str, Any]]:
        """Transform the first few records without sending anything."""
        return transform_records(list(api_records[:limit]), get_valid_mappings(mappings), self.registry)

    def sync(self, api_records: List[Any], mappings: List[FieldMapping]) -> SyncResult:
        """
        Transform the records and insert them.

        Args:
            api_records: Records fetched from the source API
            mappings: Mapping grid; invalid and disabled rows are ignored

        Returns:
            SyncResult with the ids Grist assigned

        Raises:
            EmptyRecordsError: If no record or no usable mapping is left
            GristSyncError: If Grist rejects the insertion
        """
        valid_mappings = get_valid_mappings(mappings)
        grist_records = transform_records(api_records, valid_mappings, self.registry)

        if not grist_records or not any(grist_records):
            raise EmptyRecordsError("No records to add: check the source data and the enabled mappings")

        columns = sorted({column for record in grist_records for column in record})
        logger.info(f"Syncing {len(grist_records)} record(s) into {len(columns)} column(s)")

        response = self.grist_client.add_records(grist_records)
        inserted_ids = [item.get("id") for item in (response or {}).get("records") or []]

        return SyncResult(source_count=len(api_records), inserted_ids=inserted_ids, columns=columns)
