"""
Study Store: access layer for the persisted study document.

Handles:
- Bootstrap when no document exists yet
- Corruption recovery (unparsable or schema-invalid data resets the store)
- Version migration
- Read-modify-write transactions for the engines
- Export / import / reset of the whole document

Nothing in here raises on bad persisted data: the data is best-effort practice
telemetry, so every failure path degrades to a fresh document.
"""

from __future__ import annotations

import json
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import ValidationError

from .models import SCHEMA_VERSION, StudyDocument
from .storage import StorageBackend
from .utils import Clock, now_ms

STORAGE_KEY = "n8_study_data"


# =============================================================================
# Parsing
# =============================================================================


@dataclass
class ParseResult:
    """Outcome of parsing a serialized document."""

    document: StudyDocument | None = None
    raw_version: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.document is not None


def parse_document(raw: str) -> ParseResult:
    """
    Parse and validate a serialized document.

    Args:
        raw: JSON text

    Returns:
        ParseResult holding either the document or the reason it was rejected
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as e:
        return ParseResult(error=f"invalid JSON: {e}")

    if not isinstance(data, dict):
        return ParseResult(error=f"expected a JSON object, got {type(data).__name__}")

    try:
        document = StudyDocument.model_validate(data)
    except ValidationError as e:
        return ParseResult(raw_version=data.get("version"), error=f"schema mismatch: {e}")

    return ParseResult(document=document, raw_version=data.get("version"))


def has_recognizable_version(value: Any) -> bool:
    """True for a positive integer schema version."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


# =============================================================================
# Store
# =============================================================================


class StudyStore:
    """
    Single-document store over a key-value storage backend.

    Every mutating operation runs inside `transaction()`: load, mutate, save.
    The lock serializes those cycles within a process; there is no
    cross-process coordination.
    """

    def __init__(
        self,
        backend: StorageBackend,
        storage_key: str = STORAGE_KEY,
        clock: Clock | None = None,
    ):
        """
        Initialize the store.

        Args:
            backend: Persistence port holding the serialized document
            storage_key: Key of the document slot
            clock: Epoch-millisecond clock (defaults to wall time)
        """
        self.backend = backend
        self.storage_key = storage_key
        self.clock = clock or now_ms
        self.lock = threading.RLock()

    def now(self) -> int:
        return self.clock()

    # =========================================================================
    # Load / Save / Migrate
    # =========================================================================

    def load(self) -> StudyDocument:
        """
        Read the persisted document.

        Absent data bootstraps a fresh document; corrupt data is logged and
        replaced by a fresh one; stale versions are migrated.
        """
        try:
            raw = self.backend.read(self.storage_key)
        except UnicodeDecodeError as e:
            logger.warning(f"Corrupt study data under {self.storage_key!r}, resetting: undecodable bytes: {e}")
            return self._create_fresh()

        if raw is None:
            logger.info(f"No study data under {self.storage_key!r}, creating a fresh store")
            return self._create_fresh()

        result = parse_document(raw)
        if not result.ok:
            logger.warning(f"Corrupt study data under {self.storage_key!r}, resetting: {result.error}")
            return self._create_fresh()

        document = result.document
        if document.version != SCHEMA_VERSION:
            return self.migrate(document)
        return document

    def save(self, document: StudyDocument) -> None:
        """Stamp `last_updated_at` and persist the document."""
        document.last_updated_at = self.now()
        self._write(document)

    def migrate(self, document: StudyDocument) -> StudyDocument:
        """
        Bring a document to the current schema version and persist it.

        Idempotent; fields this version does not know about are kept.
        """
        if document.version != SCHEMA_VERSION:
            logger.info(f"Migrating study data from version {document.version} to {SCHEMA_VERSION}")
        document.version = SCHEMA_VERSION
        self.save(document)
        return document

    def _create_fresh(self) -> StudyDocument:
        document = StudyDocument.fresh(self.now())
        self.save(document)
        return document

    def _write(self, document: StudyDocument) -> None:
        self.backend.write(self.storage_key, document.model_dump_json(by_alias=True))

    # =========================================================================
    # Transactions
    # =========================================================================

    @contextmanager
    def transaction(self) -> Iterator[StudyDocument]:
        """
        Load the document, yield it for mutation, then save it.

        If the body raises, the mutations are discarded.
        """
        with self.lock:
            document = self.load()
            yield document
            self.save(document)

    def snapshot(self) -> StudyDocument:
        """Load the document for read-only derivations."""
        with self.lock:
            return self.load()

    # =========================================================================
    # Export / Import / Reset
    # =========================================================================

    def export_data(self) -> str:
        """Pretty-printed JSON of the full document."""
        return self.snapshot().model_dump_json(by_alias=True, indent=2)

    def import_data(self, raw: str) -> bool:
        """
        Replace the stored document wholesale.

        Args:
            raw: Serialized document, as produced by `export_data()`

        Returns:
            True if accepted; False (store untouched) if the payload does not
            parse, lacks an integer `version`, or fails schema validation
        """
        result = parse_document(raw)
        if not result.ok:
            logger.warning(f"Rejected import: {result.error}")
            return False
        if not has_recognizable_version(result.raw_version):
            logger.warning(f"Rejected import: unrecognized version {result.raw_version!r}")
            return False

        with self.lock:
            self._write(result.document)
        logger.info(
            f"Imported study data (version {result.document.version}, "
            f"{len(result.document.sessions)} sessions)"
        )
        return True

    def reset(self) -> StudyDocument:
        """Discard the stored document and start over."""
        with self.lock:
            self.backend.remove(self.storage_key)
            logger.info(f"Reset study data under {self.storage_key!r}")
            return self._create_fresh()
