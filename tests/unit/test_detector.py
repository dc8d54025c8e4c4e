"""
Unit tests for format detection.
"""

import pytest

from catalog_pipeline.core.models import DataSource, FileRef
from catalog_pipeline.extraction import FormatDetector, detect_file_format
from catalog_pipeline.extraction.detector import DOCX_MIME_TYPE, PDF_MIME_TYPE, document_mime_type


class TestDetectFileFormat:
    """Tests for per-file format detection"""

    @pytest.mark.parametrize(
        "name,mime,expected",
        [
            ("data.json", "application/json", "json"),
            ("data.txt", "application/json; charset=utf-8", "json"),
            ("export.json", "", "json"),
            ("customers.csv", "text/csv", "csv"),
            ("customers.CSV", "application/octet-stream", "csv"),
            ("report.pdf", PDF_MIME_TYPE, "document"),
            ("report.docx", "", "document"),
            ("notes.md", "text/markdown", "text"),
            ("noextension", "", "text"),
        ],
    )
    def test_routing(self, name, mime, expected):
        """Test MIME type and extension decide the extractor"""
        assert detect_file_format(FileRef(name=name, type=mime, content="x")) == expected

    @pytest.mark.parametrize("content", [None, "", "   \n\t"])
    def test_blank_content_is_text(self, content):
        """Test blank content is handled as text whatever the type"""
        assert detect_file_format(FileRef(name="a.json", type="application/json", content=content)) == "text"

    def test_document_mime_from_extension(self):
        """Test document MIME types fall back to the extension"""
        assert document_mime_type(FileRef(name="a.docx", type="")) == DOCX_MIME_TYPE
        assert document_mime_type(FileRef(name="a.pdf", type=PDF_MIME_TYPE)) == PDF_MIME_TYPE


class TestFormatDetector:
    """Tests for source routing"""

    @pytest.mark.parametrize(
        "source_type,expected",
        [("database", "database"), ("api", "api"), ("filesystem", "files"), ("json_transformed", "files")],
    )
    def test_route(self, source_type, expected):
        """Test database and api sources bypass file detection"""
        assert FormatDetector().route(DataSource(id="s", type=source_type)) == expected
