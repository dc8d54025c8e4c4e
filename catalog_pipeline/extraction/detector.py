"""
Format detection for data source files.

Decides which extractor handles each file of a source. Detection is pure
routing: it never parses content and never fails. Anything unrecognized,
including blank content, is handled as plain text.
"""

from typing import Literal

from catalog_pipeline.core.models import DataSource, FileRef

FileFormat = Literal["json", "csv", "document", "text"]
SourceRoute = Literal["files", "database", "api"]

JSON_MIME_TYPES = frozenset({"application/json"})
CSV_MIME_TYPES = frozenset({"text/csv"})
PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOCUMENT_MIME_TYPES = frozenset({PDF_MIME_TYPE, DOCX_MIME_TYPE})

DOCUMENT_EXTENSIONS = {".pdf": PDF_MIME_TYPE, ".docx": DOCX_MIME_TYPE}


def _mime(file: FileRef) -> str:
    # "application/json; charset=utf-8" -> "application/json"
    return file.type.split(";", 1)[0].strip().lower()


def _extension(file: FileRef) -> str:
    name = file.name.lower()
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def detect_file_format(file: FileRef) -> FileFormat:
    """
    Classify one file.

    Decision order: blank content -> text; JSON MIME or .json -> json;
    CSV MIME or .csv -> csv; PDF/DOCX MIME or extension -> document;
    anything else -> text.

    Args:
        file: File reference with MIME type, name and content

    Returns:
        The extractor format to use
    """
    if not file.content or not file.content.strip():
        return "text"

    mime = _mime(file)
    extension = _extension(file)

    if mime in JSON_MIME_TYPES or extension == ".json":
        return "json"
    if mime in CSV_MIME_TYPES or extension == ".csv":
        return "csv"
    if mime in DOCUMENT_MIME_TYPES or extension in DOCUMENT_EXTENSIONS:
        return "document"
    return "text"


def document_mime_type(file: FileRef) -> str:
    """MIME type of a document file, falling back to its extension."""
    mime = _mime(file)
    if mime in DOCUMENT_MIME_TYPES:
        return mime
    return DOCUMENT_EXTENSIONS.get(_extension(file), mime)


class FormatDetector:
    """
    Routes a data source to its extractors.

    database and api sources bypass file detection; every other source type
    is processed file by file.
    """

    def route(self, source: DataSource) -> SourceRoute:
        """Return how the source as a whole is extracted."""
        if source.type == "database":
            return "database"
        if source.type == "api":
            return "api"
        return "files"

    def detect(self, file: FileRef) -> FileFormat:
        """Return the extractor format for one file."""
        return detect_file_format(file)
