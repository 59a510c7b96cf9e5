"""
Dialect Codec
=============

Converts between the canonical CharacterRecord and the key/value documents
used by TavernAI/SillyTavern, TextGenerationWebUI/Pygmalion and AICompanion.
"""

import logging
import time
from typing import Dict, Any, Optional

from .dialects import Dialect, FIELD_TABLES, IMPORT_CHAINS
from .errors import InvalidCharacterDataError
from .models import CharacterRecord
from ...config import CardSettings, get_settings

logger = logging.getLogger(__name__)


def current_millis() -> int:
    """Wall-clock time in milliseconds since epoch."""
    return time.time_ns() // 1_000_000


def _resolve_text(document: Dict[str, Any], field: str, keys: tuple) -> str:
    """First non-null value among keys, as text."""
    for key in keys:
        value = document.get(key)
        if value is None:
            continue
        if isinstance(value, str):
            return value
        if isinstance(value, (dict, list)):
            raise InvalidCharacterDataError(
                f"Field '{key}' (for {field}) must be text, got {type(value).__name__}"
            )
        # Numbers and booleans from loosely written YAML
        return str(value)
    return ""


def _resolve_created(document: Dict[str, Any]) -> Optional[int]:
    metadata = document.get("metadata")
    if not isinstance(metadata, dict):
        return None
    created = metadata.get("created")
    if created is None:
        return None
    if isinstance(created, bool) or not isinstance(created, int):
        logger.warning(f"Ignoring non-integer metadata.created value: {created!r}")
        return None
    return created


class DialectCodec:
    """Map character records to and from dialect documents."""

    @staticmethod
    def from_document(document: Any) -> CharacterRecord:
        """
        Build a record from a parsed JSON/YAML document.

        Each field takes the first non-null key of its chain
        (e.g. char_name before name); missing fields become "".
        image_path is never read from the document.

        Args:
            document: Parsed document (must be a mapping)

        Returns:
            New CharacterRecord

        Raises:
            InvalidCharacterDataError: Document is not a mapping, or a field holds a list/mapping
        """
        if not isinstance(document, dict):
            raise InvalidCharacterDataError(
                f"Character data must be an object, got {type(document).__name__}"
            )

        fields = {
            field: _resolve_text(document, field, keys)
            for field, keys in IMPORT_CHAINS
        }
        record = CharacterRecord(**fields, created_time=_resolve_created(document))

        logger.debug(f"Read character '{record.name}' from document")
        return record

    @staticmethod
    def build_metadata(
        record: CharacterRecord,
        now_ms: Optional[int] = None,
        settings: Optional[CardSettings] = None
    ) -> Dict[str, Any]:
        """
        Provenance block attached to every export.

        'created' keeps the record's original timestamp when it has one;
        'modified' is always the export time.
        """
        settings = settings or get_settings()
        if now_ms is None:
            now_ms = current_millis()

        return {
            "version": settings.metadata_version,
            "created": record.created_time if record.created_time is not None else now_ms,
            "modified": now_ms,
            "source": None,
            "tool": settings.tool.model_dump(mode='json'),
        }

    @staticmethod
    def to_document(
        record: CharacterRecord,
        dialect: Dialect,
        include_metadata: bool = True,
        now_ms: Optional[int] = None,
        settings: Optional[CardSettings] = None
    ) -> Dict[str, Any]:
        """
        Build the export document for a dialect.

        Keys come out in the dialect's table order, followed by metadata.
        The record is only read.

        Args:
            record: Character to export
            dialect: Target shape
            include_metadata: False gives the legacy shape without a metadata block
            now_ms: Export timestamp override (milliseconds)
            settings: Settings override

        Returns:
            Ordered dict ready for JSON/YAML serialization
        """
        document: Dict[str, Any] = {
            key: getattr(record, attribute)
            for key, attribute in FIELD_TABLES[dialect]
        }
        if include_metadata:
            document["metadata"] = DialectCodec.build_metadata(record, now_ms=now_ms, settings=settings)
        return document
