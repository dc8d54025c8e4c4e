"""
Catalog configuration management.

Loads the standard catalog (categories and fields) and the common-pattern
synonym table from YAML files.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from catalog_pipeline.core.models import CatalogCategory, CatalogField


class CatalogConfigLoader:
    """
    Loads standard catalog definitions from a YAML configuration file.

    Expected YAML format:
    ```yaml
    categories:
      - {name: contact, display_name: Contact Information, sort_order: 2}

    fields:
      email_address:
        display_name: Email Address
        data_type: string
        category: contact
        validation_rules: {pattern: '^[^@]+@[^@]+\\.[^@]+$'}
        tags: [contact, pii]
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the catalog config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Catalog configuration file not found: {config_path}")
        self._config: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._config is None:
            with open(self.config_path) as f:
                config = yaml.safe_load(f)
            if not isinstance(config, dict):
                raise ValueError(f"Catalog configuration must be a mapping: {self.config_path}")
            self._config = config
        return self._config

    def load_categories(self) -> list[CatalogCategory]:
        """
        Parse standard categories.

        Returns:
            Categories in sort order; ids equal names
        """
        categories = []
        for entry in self._load().get("categories", []):
            if "name" not in entry:
                raise ValueError("Category definition is missing 'name'")
            categories.append(
                CatalogCategory(
                    id=entry["name"],
                    is_standard=True,
                    display_name=entry.get("display_name", entry["name"]),
                    **{k: v for k, v in entry.items() if k != "display_name"},
                )
            )
        return sorted(categories, key=lambda c: c.sort_order)

    def load_fields(self) -> list[CatalogField]:
        """
        Parse standard fields in declaration order.

        Returns:
            CatalogField list; ids equal names, is_standard is True

        Raises:
            ValueError: If the fields section is missing or a field is invalid
        """
        config = self._load()
        if "fields" not in config:
            raise ValueError("Configuration file must contain 'fields' section")

        fields = []
        for name, definition in config["fields"].items():
            fields.append(self._parse_field(name, definition or {}))
        return fields

    def _parse_field(self, name: str, definition: dict[str, Any]) -> CatalogField:
        if "data_type" not in definition:
            raise ValueError(f"Field '{name}' is missing 'data_type'")
        try:
            return CatalogField(
                id=name,
                name=name,
                display_name=definition.get("display_name", name.replace("_", " ").title()),
                description=definition.get("description", ""),
                data_type=definition["data_type"],
                category=definition.get("category", "custom"),
                is_required=definition.get("is_required", False),
                is_standard=True,
                validation_rules=definition.get("validation_rules") or {},
                tags=definition.get("tags", []),
                related_field_ids=definition.get("related_field_ids", []),
            )
        except PydanticValidationError as e:
            raise ValueError(f"Invalid definition for field '{name}': {e}") from e


class MappingPatternLoader:
    """
    Loads the common-pattern synonym table used by mapping suggestions.

    Expected YAML format:
    ```yaml
    patterns:
      phone_number: [phone, tel, telephone, mobile]
    generic_tokens: [id, name]
    ```
    """

    def __init__(self, config_path: str | Path):
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Mapping pattern file not found: {config_path}")

        with open(self.config_path) as f:
            config = yaml.safe_load(f) or {}

        patterns = config.get("patterns", {})
        if not isinstance(patterns, dict):
            raise ValueError("'patterns' must map catalog field names to synonym lists")
        for field_name, synonyms in patterns.items():
            if not isinstance(synonyms, list):
                raise ValueError(f"Patterns for field '{field_name}' must be a list")

        self.patterns: dict[str, list[str]] = {k: [str(s) for s in v] for k, v in patterns.items()}
        self.generic_tokens: frozenset[str] = frozenset(config.get("generic_tokens", []))
