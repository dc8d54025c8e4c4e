"""
Mapping applier: rewrites source records into catalog field terms.

For every record, each mapped source field is transformed, validated and
written under its catalog field name; unmapped fields are kept under their
original keys in their original order. Validation failures are collected per
record and never stop the batch.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from catalog_pipeline.core.exceptions import MappingError
from catalog_pipeline.core.models import (
    CatalogField,
    FieldMapping,
    MappingStatistics,
    RecordValidationError,
    SourceRecord,
    TransformationResult,
)
from catalog_pipeline.core.schema import source_field_names
from catalog_pipeline.core.validators import CatalogValidator
from catalog_pipeline.observability.logger import get_logger, log_operation
from catalog_pipeline.observability.metrics import record_mapping_outcome, record_validation_failure

from .transformations import Transformation, compile_transformation

logger = get_logger(__name__)


class _CompiledMapping:
    __slots__ = ("mapping", "field", "transformation", "validator")

    def __init__(
        self,
        mapping: FieldMapping,
        field: CatalogField,
        transformation: Transformation,
    ):
        self.mapping = mapping
        self.field = field
        self.transformation = transformation
        self.validator = CatalogValidator(field)

    @property
    def source_field(self) -> str:
        return self.mapping.source_field_name

    @property
    def target(self) -> str:
        return self.field.name


class MappingApplier:
    """
    Applies confirmed field mappings to a source's records.

    Mapping definitions are checked before any record is touched: a mapping
    that references a missing catalog field, belongs to another source, or
    collides with another mapping raises MappingError.
    """

    def __init__(self, catalog_fields: Iterable[CatalogField]):
        """
        Initialize the applier.

        Args:
            catalog_fields: Catalog fields mappings may reference
        """
        self.fields_by_id = {field.id: field for field in catalog_fields}

    def _compile(
        self, source_id: str, mappings: Sequence[FieldMapping]
    ) -> tuple[list[_CompiledMapping], list[str]]:
        compiled: list[_CompiledMapping] = []
        warnings: list[str] = []
        seen_sources: set[str] = set()
        seen_targets: dict[str, str] = {}

        for mapping in mappings:
            if mapping.source_id != source_id:
                raise MappingError(
                    f"Mapping for '{mapping.source_field_name}' belongs to source "
                    f"'{mapping.source_id}', not '{source_id}'"
                )
            if mapping.source_field_name in seen_sources:
                raise MappingError(
                    f"Source field '{mapping.source_field_name}' is mapped more than once"
                )
            field = self.fields_by_id.get(mapping.catalog_field_id)
            if field is None:
                raise MappingError(
                    f"Mapping for '{mapping.source_field_name}' references unknown catalog "
                    f"field '{mapping.catalog_field_id}'"
                )
            if field.name in seen_targets:
                raise MappingError(
                    f"Catalog field '{field.name}' is targeted by both "
                    f"'{seen_targets[field.name]}' and '{mapping.source_field_name}'"
                )

            seen_sources.add(mapping.source_field_name)
            seen_targets[field.name] = mapping.source_field_name

            transformation, warning = compile_transformation(
                mapping.transformation_rule,
                label=f"{mapping.source_field_name} -> {field.name}",
            )
            if warning:
                warnings.append(warning)
            compiled.append(_CompiledMapping(mapping, field, transformation))

        return compiled, warnings

    def apply(
        self,
        source_id: str,
        records: Sequence[SourceRecord],
        mappings: Sequence[FieldMapping],
    ) -> TransformationResult:
        """
        Transform records using confirmed mappings.

        Args:
            source_id: Source the records and mappings belong to
            records: Extracted records (not modified)
            mappings: Confirmed field mappings

        Returns:
            TransformationResult with new records, validation errors and statistics

        Raises:
            MappingError: If a mapping definition is invalid
        """
        compiled, warnings = self._compile(source_id, mappings)
        by_source = {c.source_field: c for c in compiled}
        targets = {c.target for c in compiled}

        output_records: list[SourceRecord] = []
        validation_errors: list[RecordValidationError] = []
        failed_records = 0
        shadowed_keys: set[str] = set()

        with log_operation(
            "Applying field mappings",
            logger=logger,
            source_id=source_id,
            record_count=len(records),
            mapping_count=len(compiled),
        ):
            for record in records:
                mapped_values: dict[str, Any] = {}
                record_errors: list[RecordValidationError] = []

                for entry in compiled:
                    value = entry.transformation.apply(record.data.get(entry.source_field))
                    mapped_values[entry.target] = value

                    result = entry.validator.validate(value, record.data)
                    if not result.is_valid:
                        record_validation_failure(entry.target)
                        record_errors.append(
                            RecordValidationError(
                                record_index=record.record_index,
                                field=entry.target,
                                source_field=entry.source_field,
                                value=value,
                                errors=result.errors,
                            )
                        )

                output: dict[str, Any] = {}
                for key, value in record.data.items():
                    if key in by_source:
                        target = by_source[key].target
                        output[target] = mapped_values[target]
                    elif key in targets:
                        # An unmapped key with a catalog field's name loses to the mapped value
                        shadowed_keys.add(key)
                    else:
                        output[key] = value

                # Mapped fields absent from this record still get a key
                for target, value in mapped_values.items():
                    output.setdefault(target, value)

                if record_errors:
                    failed_records += 1
                    validation_errors.extend(record_errors)

                output_records.append(
                    SourceRecord(
                        id=record.id,
                        source_id=record.source_id,
                        source_name=record.source_name,
                        source_type=record.source_type,
                        record_index=record.record_index,
                        data=output,
                        metadata=record.metadata,
                        source_data=record.data,
                    )
                )

        for key in sorted(shadowed_keys):
            warning = f"Unmapped field '{key}' has the same name as a mapped catalog field and was replaced"
            logger.warning(warning, extra={"source_id": source_id})
            warnings.append(warning)

        all_source_fields = source_field_names(records)
        unmapped = [name for name in all_source_fields if name not in by_source]

        statistics = MappingStatistics(
            total_records=len(records),
            successful_records=len(records) - failed_records,
            failed_records=failed_records,
            mapped_fields=len(compiled),
            total_source_fields=len(all_source_fields),
            unmapped_fields=unmapped,
        )
        record_mapping_outcome(statistics.successful_records, failed_records)

        logger.info(
            "Field mappings applied",
            extra={
                "source_id": source_id,
                "failed_records": failed_records,
                "validation_errors": len(validation_errors),
                "unmapped_fields": len(unmapped),
            },
        )

        return TransformationResult(
            source_id=source_id,
            fields=source_field_names(output_records),
            records=output_records,
            validation_errors=validation_errors,
            statistics=statistics,
            warnings=warnings,
        )


def apply_field_mappings(
    source_id: str,
    records: Sequence[SourceRecord],
    mappings: Sequence[FieldMapping],
    catalog_fields: Iterable[CatalogField],
) -> TransformationResult:
    """Apply mappings to records with a one-off MappingApplier."""
    return MappingApplier(catalog_fields).apply(source_id, records, mappings)
