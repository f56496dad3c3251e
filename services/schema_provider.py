# ============================================================================
# SCHEMA PROVIDERS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Service - Type graph to schema definition
# PURPOSE: Write inferred type schemas into managed schema definitions
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema Providers

A SchemaProvider turns application types into a SchemaDefinition:

1. infer the TypeSchema (reachable types, one-to-many, many-to-many)
2. start a fresh schema on its SchemaManager
3. one table per type: pre-column hooks, scalar columns, post-column hooks
4. synthesize key and foreign key columns the types did not declare
5. wire every foreign key, then every many-to-many junction table

TypeInheritanceSchemaProvider differs only in step 3: a type with
ancestors becomes one table per level of its hierarchy, chained by Id
foreign keys from the most derived level up to the root.

Usage:
    provider = SchemaProvider(add_audit_fields=True)
    result = provider.create_schema_definition([Blog], schema_name="Blog")
    result.schema_definition.get_table("Post")
    result.warnings   # anything the types were missing
"""

from typing import Any, Iterable, List, Optional, Sequence, Tuple

from core.config import InferenceDefaults, SchemaDefaults, get_defaults
from core.contracts import DataType, DefaultDataTypeBehavior
from core.errors import SchemaError
from core.logging import get_logger, ComponentType, log_checkpoint, log_context
from core.models import Column, SchemaDefinitionCreateResult
from core.schema import (
    DataNamespaces,
    EchoTypeTableNameProvider,
    FieldDescriptor,
    TypeDescriptor,
    TypeInheritanceDescriptor,
    TypeSchema,
    TypeSchemaBuilder,
    TypeTableNameProvider,
    WarningCollector,
    describe,
)
from services.augmentations import AddAuditColumnsAugmentation, AddIdKeyColumnAugmentation
from services.schema_manager import SchemaManager

logger = get_logger(__name__, ComponentType.PROVIDER)


class SchemaProvider:
    """
    Builds schema definitions from types.

    Args:
        types: Default root types for create_schema_definition
        schema_manager: Manager to write through (default: no auto-save)
        table_name_provider: Type to table name mapping (default: type name)
        inference: Inference defaults (Id/audit columns, default type behavior)
        schema_defaults: Schema defaults (key field name, default schema name)
        **overrides: Any InferenceDefaults field, e.g. add_id_field=True
    """

    def __init__(
        self,
        types: Optional[Iterable[Any]] = None,
        schema_manager: Optional[SchemaManager] = None,
        table_name_provider: Optional[TypeTableNameProvider] = None,
        inference: Optional[InferenceDefaults] = None,
        schema_defaults: Optional[SchemaDefaults] = None,
        **overrides: Any,
    ):
        defaults = get_defaults()
        inference = inference or defaults.inference
        self.schema_defaults = schema_defaults or defaults.schema

        self.types: List[TypeDescriptor] = [describe(t) for t in (types or [])]
        self.schema_manager = schema_manager or SchemaManager(
            auto_save=False, defaults=self.schema_defaults
        )
        self.table_name_provider = table_name_provider or EchoTypeTableNameProvider()

        self.add_id_field: bool = overrides.pop("add_id_field", inference.add_id_field)
        self.add_audit_fields: bool = overrides.pop("add_audit_fields", inference.add_audit_fields)
        self.include_created_by: bool = overrides.pop("include_created_by", inference.include_created_by)
        self.include_modified_by: bool = overrides.pop("include_modified_by", inference.include_modified_by)
        self.default_data_type_behavior: DefaultDataTypeBehavior = overrides.pop(
            "default_data_type_behavior", inference.default_data_type_behavior
        )
        if overrides:
            raise TypeError(f"Unexpected options: {', '.join(sorted(overrides))}")

        self.warnings = WarningCollector()

    @property
    def key_field_name(self) -> str:
        return self.schema_defaults.key_field_name

    # =========================================================================
    # NAMING
    # =========================================================================

    def get_table_name(self, descriptor: TypeDescriptor) -> str:
        return self.table_name_provider.get_table_name(descriptor)

    def get_schema_name(self, types: Sequence[Any]) -> str:
        """``SchemaFor_{namespace}`` when all types share one namespace."""
        namespaces = {describe(t).namespace for t in types}
        if len(namespaces) == 1:
            namespace = namespaces.pop()
            if namespace:
                return f"SchemaFor_{namespace}"
        return self.schema_defaults.default_schema_name

    def get_schema_name_or_default(self, schema_name: Optional[str]) -> str:
        return schema_name or self.schema_defaults.default_schema_name

    def get_data_namespaces(self, types: Optional[Sequence[Any]] = None) -> DataNamespaces:
        types = list(types or self.types)
        return DataNamespaces.for_type(describe(types[0])) if types else DataNamespaces()

    # =========================================================================
    # INFERENCE
    # =========================================================================

    def create_type_schema(self, types: Optional[Iterable[Any]] = None, name: Optional[str] = None) -> TypeSchema:
        builder = TypeSchemaBuilder(
            key_field_name=self.key_field_name,
            default_data_type_behavior=self.default_data_type_behavior,
        )
        return builder.create_type_schema(types if types is not None else self.types, name=name, warnings=self.warnings)

    def create_schema_definition(
        self,
        types: Optional[Iterable[Any]] = None,
        schema_name: Optional[str] = None,
    ) -> SchemaDefinitionCreateResult:
        """
        Infer a type schema and write it into a fresh schema definition.

        Args:
            types: Root types (defaults to the provider's types)
            schema_name: Schema name (defaults to one derived from the namespace)
        """
        roots = [describe(t) for t in (types if types is not None else self.types)]
        if not roots:
            raise ValueError("No types specified")

        schema_name = self.get_schema_name_or_default(schema_name or self.get_schema_name(roots))
        self.warnings = WarningCollector()
        self._configure_augmentations()

        with log_context(schema_name=schema_name, operation="create_schema_definition"):
            log_checkpoint("schema_definition_started", {"types": [r.full_name for r in roots]})

            type_schema = self.create_type_schema(roots, name=schema_name)

            manager = self.schema_manager
            manager.set_schema(schema_name, use_existing=False)
            missing_keys, missing_fks = self.write_schema(type_schema)

            log_checkpoint("schema_definition_written", {
                "tables": len(manager.current_schema.tables),
                "missing_key_columns": len(missing_keys),
                "missing_foreign_key_columns": len(missing_fks),
            })

        return SchemaDefinitionCreateResult(
            schema_definition=manager.current_schema,
            type_schema=type_schema,
            missing_key_columns=missing_keys,
            missing_foreign_key_columns=missing_fks,
            warnings=list(type_schema.warnings),
        )

    def _configure_augmentations(self) -> None:
        manager = self.schema_manager
        if self.add_id_field and not any(
            isinstance(a, AddIdKeyColumnAugmentation) for a in manager.pre_column_augmentations
        ):
            manager.pre_column_augmentations.append(AddIdKeyColumnAugmentation(self.key_field_name))
        if self.add_audit_fields and not any(
            isinstance(a, AddAuditColumnsAugmentation) for a in manager.post_column_augmentations
        ):
            manager.post_column_augmentations.append(
                AddAuditColumnsAugmentation(self.include_created_by, self.include_modified_by)
            )

    # =========================================================================
    # WRITING
    # =========================================================================

    def write_schema(self, type_schema: TypeSchema) -> Tuple[List[Column], List[Column]]:
        """
        Write tables, synthesized columns, foreign keys and xrefs.

        Returns:
            (missing key columns, missing foreign key columns)
        """
        manager = self.schema_manager
        missing_keys: List[Column] = []
        missing_fks: List[Column] = []

        with manager.deferred_save():
            self.add_schema_tables(type_schema)

            for fk in type_schema.foreign_keys:
                if not fk.primary_key_property.synthetic:
                    continue
                table_name = self.get_table_name(fk.primary_key_type)
                key_name = fk.primary_key_property.name
                table = manager.get_table(table_name)
                if table.has_column(key_name) and table[key_name].key:
                    continue
                manager.add_column(table_name, Column(name=key_name, data_type=DataType.ULONG, allow_null=False))
                manager.set_key_column(table_name, key_name)
                missing_keys.append(manager.get_table(table_name)[key_name])

            fk_placements = []
            for fk in type_schema.foreign_keys:
                column_name = fk.foreign_key_property.name
                table_name = self.table_for_field(fk.foreign_key_type, column_name)
                if fk.foreign_key_property.synthetic:
                    manager.add_column(table_name, Column(name=column_name, data_type=DataType.ULONG))
                fk_placements.append((fk, table_name, column_name))

            for fk, table_name, column_name in fk_placements:
                target = self.get_table_name(fk.primary_key_type)
                result = manager.set_foreign_key(target, table_name, column_name)
                if not result.success:
                    logger.warning(f"Foreign key {table_name}.{column_name} -> {target} not set: {result.message}")
                elif fk.foreign_key_property.synthetic:
                    missing_fks.append(manager.get_table(table_name)[column_name])

            for xref in type_schema.xrefs:
                manager.set_xref(self.get_table_name(xref.left), self.get_table_name(xref.right))

        return missing_keys, missing_fks

    def table_for_field(self, descriptor: TypeDescriptor, field_name: str) -> str:
        """Table holding the column for a field of descriptor."""
        return self.get_table_name(descriptor)

    def add_schema_tables(self, type_schema: TypeSchema) -> None:
        for descriptor in type_schema.tables:
            self.add_schema_table(descriptor, descriptor.fields())

    def add_schema_table(self, descriptor: TypeDescriptor, fields: Sequence[FieldDescriptor]) -> str:
        """Create one table: pre-column hooks, scalar columns, post-column hooks."""
        manager = self.schema_manager
        table_name = self.get_table_name(descriptor)
        with log_context(type_name=descriptor.name, table_name=table_name):
            manager.add_table(table_name)
            manager.execute_pre_column_augmentations(table_name)
            for field_descriptor in fields:
                self.add_schema_column(table_name, field_descriptor)
            manager.execute_post_column_augmentations(table_name)
        return table_name

    def get_column_data_type(self, field_descriptor: FieldDescriptor) -> Optional[DataType]:
        """
        Column type for a field, or None when the field is skipped.

        Raises:
            SchemaError: field has no column type and the behavior is INVALID
        """
        data_type = field_descriptor.data_type
        if data_type != DataType.DEFAULT:
            return data_type

        behavior = self.default_data_type_behavior
        if behavior == DefaultDataTypeBehavior.EXCLUDE:
            return None
        if behavior == DefaultDataTypeBehavior.INCLUDE_AS_STRING:
            return DataType.STRING
        if behavior == DefaultDataTypeBehavior.INCLUDE_AS_BYTE_ARRAY:
            return DataType.BYTE_ARRAY
        raise SchemaError(f"No column type for field {field_descriptor.name}")

    def add_schema_column(self, table_name: str, field_descriptor: FieldDescriptor) -> Optional[Column]:
        """Add the column for a scalar field; collections and references are skipped."""
        if field_descriptor.is_collection or field_descriptor.reference_type is not None:
            return None

        data_type = self.get_column_data_type(field_descriptor)
        if data_type is None:
            logger.debug(f"Skipping field {table_name}.{field_descriptor.name}: no column type")
            return None

        is_key = field_descriptor.is_key or field_descriptor.name == self.key_field_name
        column = Column(
            name=field_descriptor.name,
            data_type=data_type,
            allow_null=field_descriptor.allow_null and not is_key,
            max_length=field_descriptor.max_length,
        )
        manager = self.schema_manager
        manager.add_column(table_name, column)
        if is_key:
            manager.set_key_column(table_name, column.name)
        return column


class TypeInheritanceSchemaProvider(SchemaProvider):
    """
    Table per hierarchy level.

    Each level holds only the fields it declares plus an Id column. The
    root level's Id is its key; every more derived level's Id is a foreign
    key to the Id of the level above it.
    """

    def add_schema_tables(self, type_schema: TypeSchema) -> None:
        manager = self.schema_manager
        key_name = self.key_field_name
        for descriptor in type_schema.tables:
            inheritance = TypeInheritanceDescriptor(descriptor)
            previous_table: Optional[str] = None
            for level in reversed(inheritance.chain):
                table_name = self.add_schema_table(level, level.declared_fields())
                manager.add_column(
                    table_name, Column(name=key_name, data_type=DataType.ULONG, allow_null=False)
                )
                if previous_table is None:
                    manager.set_key_column(table_name, key_name)
                else:
                    result = manager.set_foreign_key(previous_table, table_name, key_name, key_name)
                    if not result.success:
                        logger.warning(
                            f"Inheritance link {table_name} -> {previous_table} not set: {result.message}"
                        )
                previous_table = table_name

    def table_for_field(self, descriptor: TypeDescriptor, field_name: str) -> str:
        for level in TypeInheritanceDescriptor(descriptor).chain:
            if any(f.name == field_name for f in level.declared_fields()):
                return self.get_table_name(level)
        return self.get_table_name(descriptor)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SchemaProvider",
    "TypeInheritanceSchemaProvider",
]
