"""
Static Data Database.

Handles loading and validation of static progression data (regions and
the buildings they contain).

Expected layout:
    <data_path>/schemas/region.schema.json
    <data_path>/database/regions/*.json   (one region object, or a list)
"""

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema


class Database:
    """
    Central storage for static progression data.

    Records are kept as validated plain dicts, keyed by id, in load order
    (files sorted by name, then position within the file). Turning them
    into typed catalog objects is the unlock catalog's job.
    """

    def __init__(self, data_path: Path | str):
        self._data_path = Path(data_path)
        self._schemas: dict[str, Any] = {}

        # Data stores
        self.regions: dict[str, Any] = {}

        self.logger = logging.getLogger(__name__)

    @property
    def data_path(self) -> Path:
        return self._data_path

    def load_all(self) -> None:
        """Load all data from disk."""
        self._load_schemas()

        self.regions = self._load_category("regions", "region.schema.json")

        building_count = sum(len(r.get("buildings", [])) for r in self.regions.values())
        self.logger.info(
            f"Loaded {len(self.regions)} regions, "
            f"{building_count} buildings."
        )

    def _load_schemas(self) -> None:
        """Load JSON schemas."""
        schema_dir = self._data_path / "schemas"
        if not schema_dir.exists():
            self.logger.warning(f"Schema directory not found: {schema_dir}")
            return

        for schema_file in sorted(schema_dir.glob("*.schema.json")):
            try:
                with open(schema_file, 'r', encoding='utf-8') as f:
                    self._schemas[schema_file.name] = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load schema {schema_file}: {e}")

    def _load_category(self, folder: str, schema_name: str) -> dict[str, Any]:
        """Load all JSON files in a category folder."""
        category_dir = self._data_path / "database" / folder
        data_store: dict[str, Any] = {}

        if not category_dir.exists():
            self.logger.warning(f"Data directory not found: {category_dir}")
            return data_store

        schema = self._schemas.get(schema_name)
        if not schema:
            self.logger.warning(f"No schema found for {folder} ({schema_name})")
            return data_store

        for file_path in sorted(category_dir.glob("*.json")):
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load {file_path}: {e}")
                continue

            records = data if isinstance(data, list) else [data]
            for record in records:
                try:
                    jsonschema.validate(instance=record, schema=schema)
                except jsonschema.ValidationError as e:
                    self.logger.error(f"Validation error in {file_path}: {e.message}")
                    continue

                if record['id'] in data_store:
                    self.logger.error(f"Duplicate {folder} id '{record['id']}' in {file_path}")
                    continue
                data_store[record['id']] = record

        return data_store

    def get_region(self, region_id: str) -> dict[str, Any] | None:
        return self.regions.get(region_id)
