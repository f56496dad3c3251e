# ============================================================================
# SCHEMA MANAGER
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Service - Mutation orchestration over one current schema
# PURPOSE: Idempotent, result-returning schema mutations with auto-save
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema Manager

All changes to a schema go through a SchemaManager. Each mutation:
- returns a SchemaManagerResult instead of raising on invalid input
  (unknown table, non-numeric foreign key column, ...)
- is idempotent where that makes sense (re-adding a table or column keeps
  the existing one, removing something absent is a no-op)
- persists the whole schema afterwards when auto_save is on

Table names are compared with whitespace removed, so "Order Line" and
"OrderLine" name the same table.

Persistence errors are not converted into results; they propagate.
Augmentation hooks run outside the result boundary and their exceptions
propagate too.

Concurrency:
- the current schema is loaded lazily, once, under a per-manager lock
- saves are serialized by a separate save lock
- deferred_save() suspends auto-save for the calling thread only
- loading or replacing a named schema file (delete/backup then load)
  holds a lock scoped to the resolved file path, shared by every manager
  in the process; it is always taken before the per-manager lock
- mutations of different tables may run in parallel; mutations of the
  same table from two threads are not supported

Usage:
    from services.schema_manager import SchemaManager

    manager = SchemaManager(store=JsonFileSchemaStore("/data/Schemas"))
    manager.set_schema("Shop")
    manager.add_table("Order")
    manager.add_column_named("Order", "Total", DataType.DECIMAL)
    manager.set_xref("Order", "Product")
"""

import threading
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Tuple, Union

from core.config import SchemaDefaults, get_defaults
from core.contracts import DataType
from core.errors import SchemaExistsError, TableNotFoundError
from core.logging import get_logger, ComponentType, log_context
from core.models import (
    Column,
    ForeignKeyColumn,
    SchemaDefinition,
    SchemaManagerResult,
    SimpleForeignKey,
    SimpleSchemaDocument,
    SimpleTable,
    Table,
    XrefTable,
    parse_simple_schema,
)
from core.schema.naming import NameFormatter, class_name_for, table_name_for
from infrastructure.locking import LockService
from infrastructure.schema_store import JsonFileSchemaStore, SchemaStore, julian_day
from services.augmentations import SchemaManagerAugmentation
from services.generation import CodeWriter, SchemaCodeGenerator

logger = get_logger(__name__, ComponentType.MANAGER)


class SchemaManager:
    """
    Orchestrates mutations of a current SchemaDefinition.

    Args:
        auto_save: Persist after every mutation (default from SCHEMA_AUTO_SAVE)
        store: Persistence collaborator (default JSON files in SCHEMA_DIR)
        defaults: Schema defaults (default from environment)
        backup_existing: When replacing a schema file, back it up instead
            of deleting it (default from SCHEMA_BACKUP_EXISTING)
        lock_service: Path lock provider
    """

    def __init__(
        self,
        auto_save: Optional[bool] = None,
        store: Optional[SchemaStore] = None,
        defaults: Optional[SchemaDefaults] = None,
        backup_existing: Optional[bool] = None,
        lock_service: Optional[LockService] = None,
    ):
        self.defaults = defaults or get_defaults().schema
        self.auto_save = self.defaults.auto_save if auto_save is None else auto_save
        self.backup_existing = (
            self.defaults.backup_existing if backup_existing is None else backup_existing
        )
        self.store = store or JsonFileSchemaStore(self.defaults.schema_dir)
        self.lock_service = lock_service or LockService()

        self.pre_column_augmentations: List[SchemaManagerAugmentation] = []
        self.post_column_augmentations: List[SchemaManagerAugmentation] = []

        self._current_schema: Optional[SchemaDefinition] = None
        self._current_schema_lock = threading.Lock()
        self._save_lock = threading.Lock()
        self._deferral = threading.local()

    @classmethod
    def for_schema(cls, schema: SchemaDefinition, **kwargs) -> "SchemaManager":
        """Manager whose current schema is an existing in-memory schema."""
        manager = cls(**kwargs)
        manager.manage_schema(schema)
        return manager

    @classmethod
    def for_file(cls, path: str, **kwargs) -> "SchemaManager":
        """Manager whose current schema is loaded from a document path."""
        manager = cls(**kwargs)
        manager.manage_schema_file(path)
        return manager

    # =========================================================================
    # CURRENT SCHEMA
    # =========================================================================

    def default_schema_name(self) -> str:
        return f"{self.defaults.default_schema_prefix}_{julian_day()}"

    @property
    def current_schema(self) -> SchemaDefinition:
        """The schema being managed; a default-named schema is loaded on first access."""
        if self._current_schema is None:
            schema_name = self.default_schema_name()
            with self.lock_service.path_lock(self.store.path_for(schema_name)):
                with self._current_schema_lock:
                    if self._current_schema is None:
                        self._current_schema = self.load_schema(schema_name)
        return self._current_schema

    @current_schema.setter
    def current_schema(self, schema: SchemaDefinition) -> None:
        with self._current_schema_lock:
            self._current_schema = schema

    def get_current_schema(self) -> SchemaDefinition:
        return self.current_schema

    def manage_schema(self, schema: SchemaDefinition) -> SchemaDefinition:
        self.current_schema = schema
        return schema

    def manage_schema_file(self, path: str) -> SchemaDefinition:
        schema = self.store.load_path(path)
        return self.manage_schema(schema)

    def load_schema(self, schema_name: str) -> SchemaDefinition:
        """
        Load a schema by name, creating an empty one when none is stored.

        A newly created schema is written straight away when auto_save is on.
        """
        schema = self.store.load(schema_name)
        if schema is None:
            schema = SchemaDefinition(name=schema_name)
            schema.file = self.store.path_for(schema_name)
            logger.info(f"Created new schema {schema_name}")
            if self.auto_save:
                self.store.save(schema)
        return schema

    def schema_exists(self, schema_name: str) -> bool:
        return self.store.exists(schema_name)

    def set_schema(self, schema_name: str, use_existing: bool = True) -> SchemaDefinition:
        """
        Make the named schema current.

        Args:
            schema_name: Schema to load or create
            use_existing: Keep a stored schema of that name; when False the
                stored document is backed up (backup_existing) or deleted
                and a fresh schema is started
        """
        path = self.store.path_for(schema_name)
        with self.lock_service.path_lock(path):
            if not use_existing and self.store.exists(schema_name):
                if self.backup_existing:
                    self.store.backup(schema_name)
                else:
                    self.store.delete(schema_name)
            schema = self.load_schema(schema_name)
            self.current_schema = schema
        return schema

    def set_new_schema(self, schema_name: str) -> SchemaDefinition:
        """
        Start a schema that must not exist yet.

        Raises:
            SchemaExistsError: a schema of that name is already stored
        """
        if self.schema_exists(schema_name):
            raise SchemaExistsError(schema_name)
        return self.set_schema(schema_name)

    def get_table(self, table_name: str) -> Optional[Table]:
        return self.current_schema.get_table(table_name)

    def get_xref(self, xref_name: str) -> Optional[XrefTable]:
        return self.current_schema.get_xref(xref_name)

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def save(self) -> str:
        """Persist the current schema; returns the path written."""
        schema = self.current_schema
        with self._save_lock:
            return self.store.save(schema)

    @contextmanager
    def deferred_save(self) -> Iterator[None]:
        """
        Suspend auto-save inside the block and save once on exit.

        Only mutations made by the calling thread are deferred; other
        threads keep saving after each mutation.
        """
        self._deferral.depth = self._deferred_depth() + 1
        try:
            yield
        finally:
            self._deferral.depth -= 1
        self._auto_save()

    def _deferred_depth(self) -> int:
        return getattr(self._deferral, "depth", 0)

    def _auto_save(self) -> None:
        if self.auto_save and not self._deferred_depth():
            self.save()

    def _execute(self, operation: str, action: Callable[[], SchemaManagerResult], **context) -> SchemaManagerResult:
        schema = self.current_schema
        with log_context(schema_name=schema.name, operation=operation, **context):
            try:
                result = action()
            except Exception as e:
                logger.error(f"{operation} failed: {e}")
                schema.last_exception = e
                return SchemaManagerResult.from_exception(e)
        self._auto_save()
        return result

    def _require_table(self, table_name: str) -> Table:
        table = self.current_schema.get_table(table_name)
        if table is None:
            raise TableNotFoundError(table_name, self.current_schema.name)
        return table

    # =========================================================================
    # AUGMENTATIONS
    # =========================================================================

    def execute_pre_column_augmentations(self, table_name: str) -> None:
        for augmentation in list(self.pre_column_augmentations):
            augmentation.execute(table_name, self)

    def execute_post_column_augmentations(self, table_name: str) -> None:
        for augmentation in list(self.post_column_augmentations):
            augmentation.execute(table_name, self)

    # =========================================================================
    # TABLES
    # =========================================================================

    def _add_table(self, table_name: str, class_name: Optional[str] = None) -> SchemaManagerResult:
        schema = self.current_schema
        if schema.get_table(table_name) is not None:
            return SchemaManagerResult.success_result(f"Table {table_name} already exists.")
        return schema.add_table(Table(name=table_name, class_name=class_name))

    def add_table(self, table_name: str, class_name: Optional[str] = None) -> SchemaManagerResult:
        """Create a table; an existing table of that name is left as it is."""
        table_name = table_name_for(table_name)
        return self._execute(
            "add_table", lambda: self._add_table(table_name, class_name), table_name=table_name
        )

    def remove_table(self, table_name: str) -> SchemaManagerResult:
        """
        Remove a table and every reference to it.

        Foreign keys defined on the table are dropped. Foreign keys on other
        tables that point at it are turned back into plain columns, and
        cross-references naming it are removed (their junction tables stay).
        """
        table_name = table_name_for(table_name)

        def action():
            schema = self.current_schema
            if not schema.remove_table(table_name):
                return SchemaManagerResult.success_result(f"Table {table_name} not found.")
            for fk in schema.foreign_keys_for(table_name):
                schema.remove_foreign_key(fk.table_name, fk.name)
            for fk in schema.referencing_foreign_keys_for(table_name):
                source = schema.get_table(fk.table_name or "")
                if source is not None and fk.name in source.foreign_keys:
                    source.replace_column(fk.to_plain_column())
                schema.remove_foreign_key(fk.table_name or "", fk.name)
            for info in schema.left_xrefs_for(table_name) + schema.right_xrefs_for(table_name):
                schema.remove_xref(info.xref_name)
            self._refresh_referencing_foreign_keys()
            return SchemaManagerResult.success_result(f"Table {table_name} was removed.")
        return self._execute("remove_table", action, table_name=table_name)

    def set_table_class_name(self, table_name: str, class_name: str) -> SchemaManagerResult:
        table_name = table_name_for(table_name)

        def action():
            self._require_table(table_name).set_class_name(class_name)
            self.refresh_foreign_key_class_names()
            return SchemaManagerResult.success_result(
                f"Class name of {table_name} set to {class_name}."
            )
        return self._execute("set_table_class_name", action, table_name=table_name)

    # =========================================================================
    # COLUMNS
    # =========================================================================

    def add_column(self, table_name: str, column: Column) -> SchemaManagerResult:
        """Add a column; an existing column of that name keeps its attributes."""
        table_name = table_name_for(table_name)

        def action():
            if self._require_table(table_name).add_column(column):
                return SchemaManagerResult.success_result(
                    f"Column {column.name} added to {table_name}."
                )
            return SchemaManagerResult.success_result(
                f"Column {column.name} already exists on {table_name}."
            )
        return self._execute("add_column", action, table_name=table_name)

    def add_column_named(
        self,
        table_name: str,
        column_name: str,
        data_type: DataType,
        allow_null: bool = True,
        max_length: Optional[int] = None,
    ) -> SchemaManagerResult:
        return self.add_column(
            table_name,
            Column(name=column_name, data_type=data_type, allow_null=allow_null, max_length=max_length),
        )

    def remove_column(self, table_name: str, column_name: str) -> SchemaManagerResult:
        table_name = table_name_for(table_name)

        def action():
            table = self.current_schema.get_table(table_name)
            if table is None or not table.remove_column(column_name):
                return SchemaManagerResult.success_result(
                    f"Column {table_name}.{column_name} not found."
                )
            if self.current_schema.remove_foreign_key(table_name, column_name):
                self._refresh_referencing_foreign_keys()
            return SchemaManagerResult.success_result(
                f"Column {column_name} removed from {table_name}."
            )
        return self._execute("remove_column", action, table_name=table_name)

    def set_key_column(self, table_name: str, column_name: str) -> SchemaManagerResult:
        table_name = table_name_for(table_name)

        def action():
            self._require_table(table_name).set_key_column(column_name)
            return SchemaManagerResult.success_result(
                f"Key column of {table_name} set to {column_name}."
            )
        return self._execute("set_key_column", action, table_name=table_name)

    def set_column_property_name(
        self, table_name: str, column_name: str, property_name: str
    ) -> SchemaManagerResult:
        table_name = table_name_for(table_name)

        def action():
            self._require_table(table_name).set_property_name(column_name, property_name)
            return SchemaManagerResult.success_result(
                f"Property name of {table_name}.{column_name} set to {property_name}."
            )
        return self._execute("set_column_property_name", action, table_name=table_name)

    # =========================================================================
    # FOREIGN KEYS
    # =========================================================================

    def _set_foreign_key(
        self,
        target_table: str,
        referencing_table: str,
        referencing_column: str,
        referenced_key: Optional[str] = None,
        name_formatter: Optional[NameFormatter] = None,
    ) -> ForeignKeyColumn:
        schema = self.current_schema
        table = self._require_table(referencing_table)
        target = schema.get_table(target_table)

        if referenced_key is None:
            key_column = target.key_column if target is not None else None
            referenced_key = key_column.name if key_column is not None else "Id"

        column = table.get_column(referencing_column)
        referenced_class = target.class_name if target is not None else class_name_for(target_table)

        # Raises for non-integral columns before anything is changed
        fk = ForeignKeyColumn.from_column(
            column, target_table, referenced_key, referenced_class=referenced_class
        )
        if name_formatter is not None:
            fk.referencing_class = name_formatter.format_class_name(referencing_table)
            fk.referenced_class = name_formatter.format_class_name(target_table)
            fk.property_name = name_formatter.format_property_name(referencing_table, fk.name)

        table.replace_column(fk)
        schema.add_foreign_key(fk)
        if target is not None:
            target.referencing_foreign_keys = schema.referencing_foreign_keys_for(target.name)
        return fk

    def set_foreign_key(
        self,
        target_table: str,
        referencing_table: str,
        referencing_column: str,
        referenced_key: Optional[str] = None,
        name_formatter: Optional[NameFormatter] = None,
    ) -> SchemaManagerResult:
        """
        Make referencing_table.referencing_column a foreign key to target_table.

        The column must be Int, UInt, Long or ULong; otherwise the result
        fails and the schema is unchanged. referenced_key defaults to the
        target's key column name, or ``Id`` when the target has no key.
        """
        target_table = table_name_for(target_table)
        referencing_table = table_name_for(referencing_table)

        def action():
            fk = self._set_foreign_key(
                target_table, referencing_table, referencing_column, referenced_key, name_formatter
            )
            return SchemaManagerResult.success_result(
                f"Foreign key {fk.reference_name} set."
            )
        return self._execute("set_foreign_key", action, table_name=referencing_table)

    def remove_foreign_key(self, table_name: str, column_name: str) -> SchemaManagerResult:
        """Turn a foreign key back into a plain column."""
        table_name = table_name_for(table_name)

        def action():
            schema = self.current_schema
            table = schema.get_table(table_name)
            column = table.foreign_keys.get(column_name) if table is not None else None
            removed = schema.remove_foreign_key(table_name, column_name)
            if column is not None:
                table.replace_column(column.to_plain_column())
            if not removed and column is None:
                return SchemaManagerResult.success_result(
                    f"Foreign key {table_name}.{column_name} not found."
                )
            self._refresh_referencing_foreign_keys()
            return SchemaManagerResult.success_result(
                f"Foreign key {table_name}.{column_name} removed."
            )
        return self._execute("remove_foreign_key", action, table_name=table_name)

    def _refresh_referencing_foreign_keys(self) -> None:
        schema = self.current_schema
        for table in schema.table_list:
            table.referencing_foreign_keys = schema.referencing_foreign_keys_for(table.name)

    def refresh_foreign_key_class_names(self) -> None:
        """Copy current table class names onto every foreign key."""
        schema = self.current_schema
        for fk in list(schema.foreign_keys):
            source = schema.get_table(fk.table_name or "")
            target = schema.get_table(fk.referenced_table)
            if source is not None:
                fk.referencing_class = source.class_name
                fk.table_class_name = source.class_name
            if target is not None:
                fk.referenced_class = target.class_name

    # =========================================================================
    # XREFS
    # =========================================================================

    def add_xref(self, left: str, right: str) -> SchemaManagerResult:
        """Record a many-to-many pair without creating its junction table."""
        left, right = table_name_for(left), table_name_for(right)
        return self._execute(
            "add_xref", lambda: self.current_schema.add_xref(XrefTable(left=left, right=right))
        )

    def remove_xref(self, left: str, right: str) -> SchemaManagerResult:
        left, right = table_name_for(left), table_name_for(right)

        def action():
            name = f"{left}{right}"
            if self.current_schema.remove_xref(name):
                return SchemaManagerResult.success_result(f"Xref {name} removed.")
            return SchemaManagerResult.success_result(f"Xref {name} not found.")
        return self._execute("remove_xref", action)

    def set_xref(self, left: str, right: str) -> SchemaManagerResult:
        """
        Create the junction table for a many-to-many pair.

        The table is named left + right and gets Id (key), Uuid,
        {left}Id and {right}Id, with foreign keys to both sides.
        """
        left, right = table_name_for(left), table_name_for(right)

        def action():
            schema = self.current_schema
            xref = XrefTable(left=left, right=right)
            schema.add_xref(xref)
            self._add_table(xref.name)
            table = self._require_table(xref.name)
            table.add_column(Column(name="Id", data_type=DataType.ULONG, allow_null=False))
            table.set_key_column("Id")
            table.add_column(Column(name="Uuid", data_type=DataType.STRING, allow_null=False))
            table.add_column(Column(name=xref.left_column_name, data_type=DataType.ULONG, allow_null=False))
            table.add_column(Column(name=xref.right_column_name, data_type=DataType.ULONG, allow_null=False))
            self._set_foreign_key(left, xref.name, xref.left_column_name)
            self._set_foreign_key(right, xref.name, xref.right_column_name)
            return SchemaManagerResult.success_result(f"Xref {xref.name} set.")
        return self._execute("set_xref", action, table_name=f"{left}{right}")

    # =========================================================================
    # SIMPLE SCHEMA DOCUMENTS
    # =========================================================================

    def _process_table(
        self, table: SimpleTable, failures: List[str]
    ) -> Tuple[Tuple[str, SimpleForeignKey], ...]:
        """Add one document table; names of failed tables and columns go to failures."""
        table_name = table_name_for(table.name)
        with log_context(table_name=table_name):
            result = self.add_table(table_name)
            if not result.success:
                logger.warning(f"Table {table_name} not added: {result.message}")
                failures.append(table_name)
                return ()
            self.execute_pre_column_augmentations(table_name)
            for column in table.cols:
                result = self.add_column(table_name, Column(
                    name=column.name,
                    data_type=column.data_type,
                    allow_null=column.allow_null,
                    max_length=column.max_length,
                ))
                if not result.success:
                    logger.warning(f"Column {table_name}.{column.name} not added: {result.message}")
                    failures.append(f"{table_name}.{column.name}")
            self.execute_post_column_augmentations(table_name)
        return tuple((table_name, fk) for fk in table.fks)

    def apply_simple_schema(
        self, source: Union[SimpleSchemaDocument, str, bytes, dict]
    ) -> SchemaManagerResult:
        """
        Build a schema from a simple schema document.

        Replaces any stored schema of the document's name. Tables come
        first (with augmentations), then cross-references, then foreign
        keys, whose columns are added as ULong when the table lacks them.

        The result fails when a table or column could not be added. Foreign
        keys that could not be set are listed in the message of an
        otherwise successful result.

        Raises:
            SimpleSchemaParseError: source is malformed
        """
        document = source if isinstance(source, SimpleSchemaDocument) else parse_simple_schema(source)

        with log_context(schema_name=document.schema_name, operation="apply_simple_schema"):
            self.set_schema(document.schema_name, use_existing=False)
            with self.deferred_save():
                not_added: List[str] = []
                foreign_keys: List[Tuple[str, SimpleForeignKey]] = []
                for table in document.tables:
                    foreign_keys.extend(self._process_table(table, not_added))

                for xref in document.xrefs:
                    self.set_xref(xref.left, xref.right)

                failures = []
                for table_name, fk in foreign_keys:
                    self.add_column(table_name, Column(name=fk.column, data_type=DataType.ULONG))
                    result = self.set_foreign_key(fk.references, table_name, fk.column)
                    if not result.success:
                        logger.warning(f"Foreign key {table_name}.{fk.column} not set: {result.message}")
                        failures.append(f"{table_name}.{fk.column}")

            logger.info(
                f"Applied simple schema {document.schema_name}: "
                f"{len(document.tables)} table(s), {len(document.xrefs)} xref(s)"
            )

        message = f"Schema {document.schema_name} applied."
        if failures:
            message += f" Foreign keys not set: {', '.join(failures)}."
        if not_added:
            return SchemaManagerResult.failure_result(
                f"{message} Not added: {', '.join(not_added)}.",
                namespace=document.namespace,
                schema_name=document.schema_name,
            )
        return SchemaManagerResult.success_result(
            message,
            namespace=document.namespace,
            schema_name=document.schema_name,
        )

    def generate(
        self,
        source: Union[SimpleSchemaDocument, str, bytes, dict],
        code_writer: CodeWriter,
        root: str = "./",
        partials_dir: Optional[str] = None,
        generate_alternate_views: bool = False,
    ) -> SchemaManagerResult:
        """
        Apply a simple schema document and run code generation over it.

        Raises:
            SimpleSchemaParseError: source is malformed or lacks namespace/schema name
        """
        document = source if isinstance(source, SimpleSchemaDocument) else parse_simple_schema(source)
        result = self.apply_simple_schema(document)
        generator = SchemaCodeGenerator(
            code_writer,
            namespace=document.namespace,
            generate_alternate_views=generate_alternate_views,
        )
        generator.generate(self.current_schema, root=root, partials_dir=partials_dir)
        return result


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SchemaManager",
]
