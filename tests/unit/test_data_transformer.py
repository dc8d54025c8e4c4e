"""
Unit tests for DataTransformer source extraction.
"""

from catalog_pipeline.core.models import DataSource, FileRef, SourceConfiguration
from catalog_pipeline.extraction import DataTransformer


def file_ref(name, content, mime=""):
    return FileRef(name=name, type=mime, size=len(content) if content else 0, content=content)


class TestDataTransformer:
    """Tests for DataTransformer"""

    def test_indices_dense_across_files(self, file_source_factory):
        """Test record indices run 0..n-1 across all files of a source"""
        source = file_source_factory(
            file_ref("a.csv", "x,y\n1,2\n3,4\n", "text/csv"),
            file_ref("b.json", '[{"x": 5}]', "application/json"),
            file_ref("c.txt", "plain text"),
        )
        result = DataTransformer().extract(source)

        assert [r.record_index for r in result.records] == [0, 1, 2, 3]
        assert [r.metadata.original_format for r in result.records] == ["csv", "csv", "json", "text"]
        assert result.records[2].id == "src_1_b.json_item_2"

    def test_file_without_content_skipped(self, file_source_factory):
        """Test files with no content are skipped and reported"""
        source = file_source_factory(
            FileRef(name="missing.pdf", type="application/pdf"),
            file_ref("a.json", '{"a": 1}'),
        )
        result = DataTransformer().extract(source)

        assert len(result.records) == 1
        assert result.records[0].record_index == 0
        assert result.diagnostics.skipped_files == ["missing.pdf"]

    def test_empty_content_is_text(self, file_source_factory):
        """Test empty content becomes a text record"""
        result = DataTransformer().extract(file_source_factory(file_ref("empty.json", "", "application/json")))
        assert result.records[0].data["text_content"] == ""
        assert result.records[0].metadata.original_format == "text"

    def test_content_ceiling(self, file_source_factory):
        """Test files longer than the ceiling are skipped"""
        source = file_source_factory(file_ref("big.txt", "x" * 50), file_ref("small.txt", "x"))
        result = DataTransformer(max_content_chars=10).extract(source)

        assert [r.data["file_name"] for r in result.records] == ["small.txt"]
        assert result.diagnostics.skipped_files == ["big.txt"]
        assert "exceeds the limit of 10 characters" in result.diagnostics.warnings[0]

    def test_malformed_file_does_not_abort_source(self, file_source_factory):
        """Test a bad file is reported while other files still extract"""
        source = file_source_factory(
            file_ref("bad.json", "{oops", "application/json"),
            file_ref("good.csv", "a\n1\n", "text/csv"),
        )
        result = DataTransformer().extract(source)
        assert [r.data for r in result.records] == [{"a": 1}]
        assert len(result.diagnostics.parse_errors) == 1

    def test_no_files(self):
        """Test a filesystem source without files yields no records and a warning"""
        result = DataTransformer().extract(DataSource(id="s", type="filesystem"))
        assert len(result.records) == 0
        assert result.diagnostics.warnings == ["Data source 's' has no files to extract"]

    def test_database_route(self):
        """Test database sources use their rows, not files"""
        source = DataSource(
            id="db", type="database", configuration=SourceConfiguration(data=[{"id": 1}])
        )
        result = DataTransformer().extract(source)
        assert result.records[0].data == {"id": 1}
        assert result.records[0].source_type == "database"

    def test_input_not_mutated(self, customers_csv_source):
        """Test extraction leaves the source descriptor unchanged"""
        before = customers_csv_source.model_dump()
        DataTransformer().extract(customers_csv_source)
        assert customers_csv_source.model_dump() == before
