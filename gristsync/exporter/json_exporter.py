"""JSON exporter for mapping sessions."""
import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from config import GristConfig
from gristsync.mapper.mapping import FieldMapping


class JsonExporter:
    """Save and load mapping grids as JSON."""

    def export(
        self,
        output_file: Path,
        mappings: List[FieldMapping],
        grist_config: Optional[GristConfig] = None,
        source_url: Optional[str] = None,
    ) -> None:
        """Export to JSON file. The API token is never written."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "metadata": {
                "created_at": datetime.now().isoformat(),
                "source_url": source_url,
                "total_mappings": len(mappings),
                "enabled_mappings": sum(1 for m in mappings if m.enabled),
            },
            "grist": grist_config.to_dict() if grist_config else None,
            "mappings": [m.to_dict() for m in mappings],
        }

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False, default=str)

    def load_mappings(self, input_file: Path) -> List[FieldMapping]:
        """Load mappings from an exported file, or from a bare list of mappings."""
        with open(input_file, "r", encoding="utf-8") as f:
            data = json.load(f)

        items = data.get("mappings", []) if isinstance(data, dict) else data
        return [FieldMapping.from_dict(item) for item in items if isinstance(item, dict)]
