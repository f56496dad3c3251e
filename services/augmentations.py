# ============================================================================
# SCHEMA MANAGER AUGMENTATIONS
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Service - Per-table hooks run around column generation
# PURPOSE: Inject synthetic key and audit columns into generated tables
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema Manager Augmentations

Hooks registered on a SchemaManager run for every table the manager
builds from types or from a simple schema document:

- pre-column augmentations run right after the table is created
- post-column augmentations run after the table's own columns are added

Each hook gets the table name and the manager, and mutates through the
manager like any other caller. Hooks run in registration order and their
exceptions are not caught.

Usage:
    manager.pre_column_augmentations.append(AddIdKeyColumnAugmentation())
    manager.post_column_augmentations.append(
        AddAuditColumnsAugmentation(include_created_by=True)
    )
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable

from core.contracts import DataType
from core.models import Column

if TYPE_CHECKING:
    from services.schema_manager import SchemaManager


class SchemaManagerAugmentation(ABC):
    """A hook run against one table during schema generation."""

    @abstractmethod
    def execute(self, table_name: str, manager: "SchemaManager") -> None:
        ...


class AddIdKeyColumnAugmentation(SchemaManagerAugmentation):
    """Add a not-null ULong key column (``Id`` by default) to every table."""

    def __init__(self, column_name: str = "Id"):
        self.column_name = column_name

    def execute(self, table_name: str, manager: "SchemaManager") -> None:
        manager.add_column(
            table_name,
            Column(name=self.column_name, data_type=DataType.ULONG, allow_null=False),
        )
        manager.set_key_column(table_name, self.column_name)


class AddAuditColumnsAugmentation(SchemaManagerAugmentation):
    """
    Add audit columns to every table.

    Created and Modified are always added; CreatedBy and ModifiedBy are
    optional.
    """

    def __init__(self, include_created_by: bool = False, include_modified_by: bool = False):
        self.include_created_by = include_created_by
        self.include_modified_by = include_modified_by

    def execute(self, table_name: str, manager: "SchemaManager") -> None:
        manager.add_column(table_name, Column(name="Created", data_type=DataType.DATE_TIME))
        manager.add_column(table_name, Column(name="Modified", data_type=DataType.DATE_TIME))
        if self.include_created_by:
            manager.add_column(table_name, Column(name="CreatedBy", data_type=DataType.STRING))
        if self.include_modified_by:
            manager.add_column(table_name, Column(name="ModifiedBy", data_type=DataType.STRING))


class CallableAugmentation(SchemaManagerAugmentation):
    """Wrap a plain function ``func(table_name, manager)`` as an augmentation."""

    def __init__(self, func: Callable[[str, "SchemaManager"], None]):
        self.func = func

    def execute(self, table_name: str, manager: "SchemaManager") -> None:
        self.func(table_name, manager)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SchemaManagerAugmentation",
    "AddIdKeyColumnAugmentation",
    "AddAuditColumnsAugmentation",
    "CallableAugmentation",
]
