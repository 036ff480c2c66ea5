"""
Game Database.

Handles loading and validation of static battle data (abilities).
"""

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema


class Database:
    """
    Central storage for static battle data.

    Layout under data_path:
        schemas/<name>.schema.json
        database/<category>/*.json
    """

    # category folder -> schema file
    CATEGORIES = {
        "abilities": "ability.schema.json",
    }

    def __init__(self, data_path: Path | str):
        self._data_path = Path(data_path)
        self._schemas: dict[str, Any] = {}

        # Data stores
        self.abilities: dict[str, dict[str, Any]] = {}

        self.logger = logging.getLogger(__name__)

    def load_all(self) -> None:
        """Load all data from disk."""
        self._load_schemas()

        self.abilities = self._load_category("abilities", self.CATEGORIES["abilities"])

        self.logger.info(f"Loaded {len(self.abilities)} abilities from {self._data_path}")

    def _load_schemas(self) -> None:
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

    def _load_category(self, folder: str, schema_name: str) -> dict[str, dict[str, Any]]:
        """Load every JSON file in a category folder, keyed by record id."""
        category_dir = self._data_path / "database" / folder
        data_store: dict[str, dict[str, Any]] = {}

        if not category_dir.exists():
            self.logger.warning(f"Data directory not found: {category_dir}")
            return data_store

        schema = self._schemas.get(schema_name)
        if schema is None:
            # Unvalidated data never enters the store
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

                if record["id"] in data_store:
                    self.logger.warning(f"Duplicate {folder} id '{record['id']}' in {file_path}")
                data_store[record["id"]] = record

        return data_store

    def get_ability(self, ability_id: str) -> dict[str, Any] | None:
        return self.abilities.get(ability_id)
