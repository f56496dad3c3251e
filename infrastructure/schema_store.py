# ============================================================================
# SCHEMA STORE
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Infrastructure - Schema persistence
# PURPOSE: Load and save schema definitions as JSON documents
# CREATED: 19 OCT 2026
# ============================================================================
"""
Schema Store

Persists one SchemaDefinition per ``{name}.json`` file under a root
directory. I/O errors are not caught; they propagate to the caller.

Usage:
    from infrastructure.schema_store import JsonFileSchemaStore

    store = JsonFileSchemaStore("/data/Schemas")
    store.save(schema)
    schema = store.load("Blog")      # None when no Blog.json exists
"""

import logging
import os
import random
import string
from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path
from typing import Optional, Union

from core.config import get_defaults
from core.models import SchemaDefinition

logger = logging.getLogger(__name__)


def julian_day(on: Optional[date] = None) -> int:
    """Julian day number of a date (today by default)."""
    on = on or date.today()
    return on.toordinal() + 1721425


def random_letters(count: int = 4) -> str:
    return "".join(random.choice(string.ascii_letters) for _ in range(count))


class SchemaStore(ABC):
    """Persistence collaborator for schema definitions."""

    @abstractmethod
    def path_for(self, schema_name: str) -> str:
        """Path of the document for a schema name."""

    @abstractmethod
    def exists(self, schema_name: str) -> bool:
        ...

    @abstractmethod
    def load(self, schema_name: str) -> Optional[SchemaDefinition]:
        """Load a schema by name, or None when it was never saved."""

    @abstractmethod
    def save(self, schema: SchemaDefinition, path: Optional[str] = None) -> str:
        """Save a schema; returns the path written."""

    @abstractmethod
    def delete(self, schema_name: str) -> bool:
        ...

    @abstractmethod
    def backup(self, schema_name: str) -> Optional[str]:
        """Move an existing document aside; returns the backup path."""


class JsonFileSchemaStore(SchemaStore):
    """
    Schema documents as JSON files in one directory.

    Loaded schemas get ``file`` set to the path they were read from, and
    are renamed to the requested name when the document says otherwise.
    """

    def __init__(self, root_dir: Optional[Union[str, Path]] = None):
        self.root_dir = Path(root_dir or get_defaults().schema.schema_dir)

    def path_for(self, schema_name: str) -> str:
        return str(self.root_dir / f"{schema_name}.json")

    def exists(self, schema_name: str) -> bool:
        return os.path.isfile(self.path_for(schema_name))

    def load(self, schema_name: str) -> Optional[SchemaDefinition]:
        path = self.path_for(schema_name)
        if not os.path.isfile(path):
            logger.debug(f"No schema document at {path}")
            return None
        schema = self.load_path(path)
        schema.name = schema_name
        return schema

    def load_path(self, path: Union[str, Path]) -> SchemaDefinition:
        """
        Load a schema document from an explicit path.

        Raises:
            FileNotFoundError: path does not exist
            pydantic.ValidationError: document is not a schema
        """
        text = Path(path).read_text(encoding="utf-8")
        schema = SchemaDefinition.from_json(text)
        schema.file = str(path)
        logger.info(f"Loaded schema {schema.name} from {path}")
        return schema

    def save(self, schema: SchemaDefinition, path: Optional[str] = None) -> str:
        target = Path(path or schema.file or self.path_for(schema.name))
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(schema.to_json(), encoding="utf-8")
        schema.file = str(target)
        logger.debug(f"Saved schema {schema.name} to {target}")
        return str(target)

    def delete(self, schema_name: str) -> bool:
        path = self.path_for(schema_name)
        if not os.path.isfile(path):
            return False
        os.remove(path)
        logger.info(f"Deleted schema document {path}")
        return True

    def backup(self, schema_name: str) -> Optional[str]:
        """Rename ``{name}.json`` to ``{name}_{julian day}_{4 letters}.json``."""
        path = self.path_for(schema_name)
        if not os.path.isfile(path):
            return None
        backup_path = self.path_for(f"{schema_name}_{julian_day()}_{random_letters()}")
        os.replace(path, backup_path)
        logger.info(f"Backed up schema document {path} to {backup_path}")
        return backup_path


def get_schema_store(root_dir: Optional[Union[str, Path]] = None) -> JsonFileSchemaStore:
    """
    Get a JSON file store.

    Args:
        root_dir: Directory for schema documents (defaults to SCHEMA_DIR)
    """
    return JsonFileSchemaStore(root_dir)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SchemaStore",
    "JsonFileSchemaStore",
    "get_schema_store",
    "julian_day",
    "random_letters",
]
