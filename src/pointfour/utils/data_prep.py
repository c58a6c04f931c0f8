"""Data preparation for export."""

import datetime
import json
from typing import Any, Dict

from .. import __version__
from ..core.models import SearchResponse


def prepare_export(response: SearchResponse) -> Dict[str, Any]:
    """Serialize a search response with export metadata."""
    export_data = response.to_dict()
    export_data["metadata"] = {
        "export_timestamp": None,  # Will be set by export_to_json
        "version": __version__,
        "review_count": len(response.reviews),
        "groups": {
            name: len(items) for name, items in export_data["groupedReviews"].items()
        },
    }
    return export_data


def export_to_json(data: Dict[str, Any], filename: str, pretty: bool = True) -> None:
    """Export data to JSON file."""
    data.setdefault("metadata", {})["export_timestamp"] = datetime.datetime.now().isoformat()

    with open(filename, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2 if pretty else None, ensure_ascii=False)


def load_export(filename: str) -> Dict[str, Any]:
    with open(filename, "r", encoding="utf-8") as f:
        return json.load(f)
