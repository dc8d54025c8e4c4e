"""
Unit tests for settings and YAML catalog configuration loading.
"""

import pytest
from pydantic import ValidationError

from catalog_pipeline.config import (
    DEFAULT_MAPPING_PATTERNS_PATH,
    DEFAULT_STANDARD_CATALOG_PATH,
    PipelineSettings,
    load_settings,
)
from catalog_pipeline.core.catalog_config import CatalogConfigLoader, MappingPatternLoader


class TestLoadSettings:
    """Tests for environment-driven settings"""

    def test_defaults(self, monkeypatch):
        """Test defaults apply when no variables are set"""
        for var in (
            "LOG_LEVEL",
            "LOG_FORMAT",
            "CATALOG_DEFAULT_MAX_RECORDS",
            "CATALOG_MAX_CONTENT_CHARS",
            "CATALOG_SUGGESTION_MIN_CONFIDENCE",
            "CATALOG_AUTO_MAP_MIN_CONFIDENCE",
            "CATALOG_STANDARD_FIELDS_PATH",
            "CATALOG_MAPPING_PATTERNS_PATH",
        ):
            monkeypatch.delenv(var, raising=False)

        settings = load_settings()
        assert settings.default_max_records == 100
        assert settings.max_content_chars is None
        assert settings.suggestion_min_confidence == 0.5
        assert settings.auto_map_min_confidence == 0.8
        assert settings.standard_catalog_path == DEFAULT_STANDARD_CATALOG_PATH

    def test_environment_overrides(self, monkeypatch):
        """Test variables are parsed into typed settings"""
        monkeypatch.setenv("CATALOG_DEFAULT_MAX_RECORDS", "25")
        monkeypatch.setenv("CATALOG_MAX_CONTENT_CHARS", "1000")
        monkeypatch.setenv("CATALOG_AUTO_MAP_MIN_CONFIDENCE", "0.9")

        settings = load_settings()
        assert settings.default_max_records == 25
        assert settings.max_content_chars == 1000
        assert settings.auto_map_min_confidence == 0.9

    def test_env_file_does_not_override_environment(self, tmp_path, monkeypatch):
        """Test .env values fill gaps but existing variables win"""
        env_file = tmp_path / "test.env"
        env_file.write_text("CATALOG_DEFAULT_MAX_RECORDS=7\nCATALOG_SUGGESTION_MIN_CONFIDENCE=0.6\n")
        monkeypatch.setenv("CATALOG_DEFAULT_MAX_RECORDS", "3")
        # Register the variable so load_dotenv's write is undone after the test
        monkeypatch.setenv("CATALOG_SUGGESTION_MIN_CONFIDENCE", "0.5")
        monkeypatch.delenv("CATALOG_SUGGESTION_MIN_CONFIDENCE")

        settings = load_settings(env_file)
        assert settings.default_max_records == 3
        assert settings.suggestion_min_confidence == 0.6

    def test_invalid_value_rejected(self, monkeypatch):
        """Test out-of-range confidence fails validation"""
        monkeypatch.setenv("CATALOG_SUGGESTION_MIN_CONFIDENCE", "1.5")
        with pytest.raises(ValidationError):
            load_settings()

    def test_negative_max_records_rejected(self):
        """Test max records cannot be negative"""
        with pytest.raises(ValidationError):
            PipelineSettings(default_max_records=-1)


class TestCatalogConfigLoader:
    """Tests for CatalogConfigLoader"""

    def test_standard_catalog_loads(self):
        """Test the packaged standard catalog parses"""
        loader = CatalogConfigLoader(DEFAULT_STANDARD_CATALOG_PATH)
        fields = loader.load_fields()
        names = [f.name for f in fields]

        assert len(fields) == 35
        assert names[0] == "person_id"
        assert {"email_address", "phone_number", "account_number", "record_id"} <= set(names)
        assert all(f.is_standard and f.id == f.name for f in fields)

    def test_standard_categories_sorted(self):
        """Test categories come back in sort order"""
        categories = CatalogConfigLoader(DEFAULT_STANDARD_CATALOG_PATH).load_categories()
        assert [c.name for c in categories][:3] == ["identity", "contact", "location"]
        assert categories[-1].name == "custom"
        assert all(c.is_standard for c in categories)

    def test_missing_file(self, tmp_path):
        """Test a missing file raises FileNotFoundError"""
        with pytest.raises(FileNotFoundError):
            CatalogConfigLoader(tmp_path / "missing.yaml")

    def test_missing_fields_section(self, tmp_path):
        """Test configuration without fields is rejected"""
        path = tmp_path / "catalog.yaml"
        path.write_text("categories: []\n")
        with pytest.raises(ValueError, match="fields"):
            CatalogConfigLoader(path).load_fields()

    def test_missing_data_type(self, tmp_path):
        """Test each field must declare a data type"""
        path = tmp_path / "catalog.yaml"
        path.write_text("fields:\n  score:\n    display_name: Score\n")
        with pytest.raises(ValueError, match="data_type"):
            CatalogConfigLoader(path).load_fields()

    def test_invalid_field_definition(self, tmp_path):
        """Test invalid rules surface as ValueError naming the field"""
        path = tmp_path / "catalog.yaml"
        path.write_text("fields:\n  code:\n    data_type: string\n    validation_rules: {pattern: '([a-'}\n")
        with pytest.raises(ValueError, match="code"):
            CatalogConfigLoader(path).load_fields()

    def test_display_name_defaults_from_name(self, tmp_path):
        """Test display name falls back to a title-cased name"""
        path = tmp_path / "catalog.yaml"
        path.write_text("fields:\n  order_total:\n    data_type: currency\n")
        field = CatalogConfigLoader(path).load_fields()[0]
        assert field.display_name == "Order Total"
        assert field.category == "custom"


class TestMappingPatternLoader:
    """Tests for MappingPatternLoader"""

    def test_packaged_patterns(self):
        """Test the packaged pattern table loads"""
        loader = MappingPatternLoader(DEFAULT_MAPPING_PATTERNS_PATH)
        assert "dob" in loader.patterns["date_of_birth"]
        assert "id" in loader.generic_tokens

    def test_non_list_synonyms_rejected(self, tmp_path):
        """Test synonyms must be lists"""
        path = tmp_path / "patterns.yaml"
        path.write_text("patterns:\n  email_address: email\n")
        with pytest.raises(ValueError):
            MappingPatternLoader(path)
