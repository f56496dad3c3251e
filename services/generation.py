# ============================================================================
# CODE GENERATION DRIVER
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Service - Drives a code writer over a finished schema
# PURPOSE: Fix the order in which per-table artifacts are requested
# CREATED: 19 OCT 2026
# ============================================================================
"""
Code Generation Driver

The engine does not render code. It asks a CodeWriter for artifacts in a
fixed order:

    context class (once)
    for each table, in insertion order:
        partial            (only when a partials directory is configured)
        class
        query
        paged query
        alternate view     (only when enabled)
        collection
        columns

Writers decide what each artifact looks like and where it goes.
"""

import os
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from core.errors import NamespaceNotSpecifiedError
from core.logging import get_logger, ComponentType, log_checkpoint, log_context
from core.models import SchemaDefinition, Table

logger = get_logger(__name__, ComponentType.GENERATION)


class CodeWriter(ABC):
    """Renders generated artifacts for a schema."""

    @abstractmethod
    def write_context_class(self, schema: SchemaDefinition, namespace: str, root: str) -> None:
        ...

    @abstractmethod
    def write_partial(self, schema: SchemaDefinition, table: Table, namespace: str, partials_dir: str) -> None:
        ...

    @abstractmethod
    def write_class(self, schema: SchemaDefinition, table: Table, namespace: str, root: str) -> None:
        ...

    @abstractmethod
    def write_query_class(self, schema: SchemaDefinition, table: Table, namespace: str, root: str) -> None:
        ...

    @abstractmethod
    def write_paged_query_class(self, schema: SchemaDefinition, table: Table, namespace: str, root: str) -> None:
        ...

    @abstractmethod
    def write_alternate_view_class(self, schema: SchemaDefinition, table: Table, namespace: str, root: str) -> None:
        ...

    @abstractmethod
    def write_collection_class(self, schema: SchemaDefinition, table: Table, namespace: str, root: str) -> None:
        ...

    @abstractmethod
    def write_columns_class(self, schema: SchemaDefinition, table: Table, namespace: str, root: str) -> None:
        ...


GenerationCallback = Callable[[SchemaDefinition], None]


class SchemaCodeGenerator:
    """
    Runs a CodeWriter over a schema in the fixed artifact order.

    on_started and on_complete callbacks receive the schema; exceptions
    from callbacks and from the writer propagate.
    """

    def __init__(
        self,
        code_writer: CodeWriter,
        namespace: str,
        generate_alternate_views: bool = False,
    ):
        self.code_writer = code_writer
        self.namespace = namespace
        self.generate_alternate_views = generate_alternate_views
        self.on_started: List[GenerationCallback] = []
        self.on_complete: List[GenerationCallback] = []

    def generate(
        self,
        schema: SchemaDefinition,
        root: str = "./",
        partials_dir: Optional[str] = None,
    ) -> int:
        """
        Generate artifacts for every table.

        Returns:
            Number of tables generated

        Raises:
            NamespaceNotSpecifiedError: namespace is empty
        """
        if not self.namespace or not self.namespace.strip():
            raise NamespaceNotSpecifiedError()

        if partials_dir:
            os.makedirs(partials_dir, exist_ok=True)

        writer = self.code_writer
        namespace = self.namespace

        with log_context(schema_name=schema.name, operation="generate"):
            for callback in self.on_started:
                callback(schema)

            writer.write_context_class(schema, namespace, root)

            tables = schema.table_list
            for table in tables:
                with log_context(table_name=table.name):
                    if partials_dir:
                        writer.write_partial(schema, table, namespace, partials_dir)
                    writer.write_class(schema, table, namespace, root)
                    writer.write_query_class(schema, table, namespace, root)
                    writer.write_paged_query_class(schema, table, namespace, root)
                    if self.generate_alternate_views:
                        writer.write_alternate_view_class(schema, table, namespace, root)
                    writer.write_collection_class(schema, table, namespace, root)
                    writer.write_columns_class(schema, table, namespace, root)
                    logger.debug(f"Generated artifacts for table {table.name}")

            for callback in self.on_complete:
                callback(schema)

            log_checkpoint("code_generation_complete", {
                "namespace": namespace,
                "tables": len(tables),
            })

        return len(tables)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "CodeWriter",
    "GenerationCallback",
    "SchemaCodeGenerator",
]
