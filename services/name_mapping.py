# ============================================================================
# MAPPED SCHEMA DEFINITIONS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Service - Bulk class/property name mapping
# PURPOSE: Apply a SchemaNameMap to every table and column of a schema
# CREATED: 19 OCT 2026
# ============================================================================
"""
Mapped Schema Definitions

A MappedSchemaDefinition pairs a schema with its SchemaNameMap. Applying
the map touches every table and every column, so the work is split per
table and run on a thread pool: each worker only mutates its own table.
Foreign key class names span tables and are refreshed once at the end.

Usage:
    mapped = MappedSchemaDefinition(schema, name_map)
    mapped.map_schema_class_and_property_names()
    mapped.save("/data/Blog.mapped.json")
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field

from core.config import get_defaults
from core.logging import get_logger, ComponentType, log_context
from core.models import SchemaDefinition, SchemaNameMap, Table
from core.schema.naming import CollisionAwareNameFormatter, NameFormatter, SchemaNameMapNameFormatter
from services.schema_manager import SchemaManager

logger = get_logger(__name__, ComponentType.NAMING)


class MappedSchemaDefinition(BaseModel):
    """A schema definition together with its class/property name map."""

    schema_definition: SchemaDefinition = Field(default_factory=SchemaDefinition)
    schema_name_map: SchemaNameMap = Field(default_factory=SchemaNameMap)
    file: Optional[str] = Field(default=None, exclude=True)

    def __init__(
        self,
        schema_definition: Optional[SchemaDefinition] = None,
        schema_name_map: Optional[SchemaNameMap] = None,
        **data,
    ):
        if schema_definition is not None:
            data["schema_definition"] = schema_definition
        if schema_name_map is not None:
            data["schema_name_map"] = schema_name_map
        super().__init__(**data)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "MappedSchemaDefinition":
        mapped = cls.model_validate_json(Path(path).read_text(encoding="utf-8"))
        mapped.file = str(path)
        return mapped

    def save(self, path: Optional[Union[str, Path]] = None) -> str:
        target = Path(path or self.file or f"{self.schema_definition.name}.mapped.json")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        self.file = str(target)
        return str(target)

    def map_schema_class_and_property_names(
        self,
        max_workers: Optional[int] = None,
        name_formatter: Optional[NameFormatter] = None,
    ) -> SchemaDefinition:
        """
        Apply the name map to every table and column.

        Args:
            max_workers: Thread pool size (default SCHEMA_MAPPING_WORKERS)
            name_formatter: Formatter to apply instead of the name map (by
                default the map, with property names that clash with their
                class name rewritten by SCHEMA_NAMING_COLLISION_STRATEGY)

        Returns:
            The mapped schema definition
        """
        defaults = get_defaults()
        formatter = name_formatter or CollisionAwareNameFormatter(
            SchemaNameMapNameFormatter(self.schema_name_map),
            strategy=defaults.inference.naming_collision_strategy,
        )
        manager = SchemaManager.for_schema(self.schema_definition, auto_save=False)
        workers = max_workers or defaults.mapping.max_workers
        tables = self.schema_definition.table_list

        with log_context(schema_name=self.schema_definition.name, operation="map_names"):
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = [pool.submit(self._map_table, manager, formatter, table) for table in tables]
                for future in futures:
                    future.result()

            manager.refresh_foreign_key_class_names()
            logger.info(f"Mapped class and property names for {len(tables)} table(s)")

        return self.schema_definition

    @staticmethod
    def _map_table(manager: SchemaManager, formatter: NameFormatter, table: Table) -> None:
        table.set_class_name(formatter.format_class_name(table.name))
        for column in table.column_list:
            result = manager.set_column_property_name(
                table.name, column.name, formatter.format_property_name(table.name, column.name)
            )
            if not result.success:
                logger.warning(f"Property name not set for {table.name}.{column.name}: {result.message}")


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "MappedSchemaDefinition",
]
