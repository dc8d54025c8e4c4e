"""
Plain-text extractor: one record per file.
"""

from catalog_pipeline.core.models import FileRef

from .base import ExtractionResult, FileExtractor


class TextExtractor(FileExtractor):
    """Emits the raw text with line, word and character counts."""

    format_name = "text"

    def extract(self, file: FileRef, start_index: int = 0) -> ExtractionResult:
        content = file.content or ""
        record = self.build_record(
            record_id=self.record_id(file, "text"),
            record_index=start_index,
            data={
                "file_name": file.name,
                "text_content": content,
                "line_count": len(content.split("\n")),
                "word_count": len(content.split()),
                "character_count": len(content),
            },
            original_format="text",
            method="direct_text_read",
            file=file,
        )
        return ExtractionResult([record])
