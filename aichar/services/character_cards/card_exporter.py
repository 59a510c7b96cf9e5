"""
Character Card Exporter
======================

Export characters as dialect JSON/YAML or as PNG character cards.
"""

import json
import yaml
import logging
from pathlib import Path
from typing import Optional, Dict, Any, Union

from .dialect_codec import DialectCodec
from .dialects import Dialect, resolve_dialect
from .errors import MissingImageError
from .metadata_handler import PNGMetadataHandler
from .models import CharacterRecord
from ...config import CardSettings, get_settings

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _write_text_file(path: PathLike, text: str) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)


class CharacterCardExporter:
    """Export a CharacterRecord to the supported formats."""

    def __init__(self, settings: Optional[CardSettings] = None):
        """
        Initialize exporter.

        Args:
            settings: Card settings (defaults to the active settings)
        """
        self.settings = settings or get_settings()

    def build_document(
        self,
        record: CharacterRecord,
        format_type: Optional[str],
        include_metadata: bool = True
    ) -> Dict[str, Any]:
        """
        Export document for a format identifier; None means neutral.

        Raises:
            UnsupportedFormatError: Unknown format identifier
        """
        dialect = Dialect.NEUTRAL if format_type is None else resolve_dialect(format_type)
        return DialectCodec.to_document(
            record,
            dialect,
            include_metadata=include_metadata,
            settings=self.settings,
        )

    def to_json(self, record: CharacterRecord, format_type: Optional[str], include_metadata: bool = True) -> str:
        document = self.build_document(record, format_type, include_metadata)
        return json.dumps(document, indent=self.settings.json_indent, ensure_ascii=False)

    def to_yaml(self, record: CharacterRecord, format_type: Optional[str], include_metadata: bool = True) -> str:
        document = self.build_document(record, format_type, include_metadata)
        return yaml.safe_dump(
            document,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )

    def to_card_bytes(self, record: CharacterRecord, format_type: Optional[str]) -> bytes:
        """
        Embed the character into its image as a PNG character card.

        The image is re-read from record.image_path on every call.

        Args:
            record: Character to export
            format_type: Dialect identifier, None for neutral

        Returns:
            PNG file data with embedded character payload

        Raises:
            MissingImageError: record.image_path is not set
            UnsupportedFormatError: Unknown format identifier
            PngDecodeError: image_path is not a decodable PNG
            PngEncodeError: Payload chunk could not be built
        """
        if record.image_path is None:
            raise MissingImageError()

        # Resolve the format before touching the disk
        card_json = self.to_json(record, format_type)

        image_data = PNGMetadataHandler.extract_image(record.image_path)
        card_png = PNGMetadataHandler.write_text_chunk(
            image_data,
            self.settings.chunk_keyword,
            PNGMetadataHandler.encode_payload(card_json),
            path=record.image_path,
        )

        logger.info(f"Exported character card for '{record.name}' ({format_type or 'neutral'})")
        return card_png


def export_json(record: CharacterRecord, format_type: str, settings: Optional[CardSettings] = None) -> str:
    """Dialect JSON text. Raises UnsupportedFormatError for unknown formats."""
    return CharacterCardExporter(settings).to_json(record, format_type)


def export_neutral_json(
    record: CharacterRecord,
    include_metadata: bool = True,
    settings: Optional[CardSettings] = None
) -> str:
    """Neutral JSON text carrying every dialect's keys."""
    return CharacterCardExporter(settings).to_json(record, None, include_metadata)


def export_json_file(
    record: CharacterRecord,
    format_type: str,
    export_json_path: PathLike,
    settings: Optional[CardSettings] = None
) -> None:
    _write_text_file(export_json_path, export_json(record, format_type, settings))
    logger.info(f"Wrote {format_type} JSON for '{record.name}' to {export_json_path}")


def export_neutral_json_file(
    record: CharacterRecord,
    export_json_path: PathLike,
    settings: Optional[CardSettings] = None
) -> None:
    _write_text_file(export_json_path, export_neutral_json(record, settings=settings))
    logger.info(f"Wrote neutral JSON for '{record.name}' to {export_json_path}")


def export_yaml(record: CharacterRecord, format_type: str, settings: Optional[CardSettings] = None) -> str:
    """Dialect YAML text, same mapping as export_json."""
    return CharacterCardExporter(settings).to_yaml(record, format_type)


def export_neutral_yaml(
    record: CharacterRecord,
    include_metadata: bool = True,
    settings: Optional[CardSettings] = None
) -> str:
    return CharacterCardExporter(settings).to_yaml(record, None, include_metadata)


def export_yaml_file(
    record: CharacterRecord,
    format_type: str,
    export_yaml_path: PathLike,
    settings: Optional[CardSettings] = None
) -> None:
    _write_text_file(export_yaml_path, export_yaml(record, format_type, settings))
    logger.info(f"Wrote {format_type} YAML for '{record.name}' to {export_yaml_path}")


def export_neutral_yaml_file(
    record: CharacterRecord,
    export_yaml_path: PathLike,
    settings: Optional[CardSettings] = None
) -> None:
    _write_text_file(export_yaml_path, export_neutral_yaml(record, settings=settings))
    logger.info(f"Wrote neutral YAML for '{record.name}' to {export_yaml_path}")


def export_card_bytes(record: CharacterRecord, format_type: str, settings: Optional[CardSettings] = None) -> bytes:
    return CharacterCardExporter(settings).to_card_bytes(record, format_type)


def export_neutral_card_bytes(record: CharacterRecord, settings: Optional[CardSettings] = None) -> bytes:
    return CharacterCardExporter(settings).to_card_bytes(record, None)


def export_card_file(
    record: CharacterRecord,
    format_type: str,
    export_card_path: PathLike,
    settings: Optional[CardSettings] = None
) -> None:
    card_png = export_card_bytes(record, format_type, settings)
    PNGMetadataHandler.save_image(card_png, str(export_card_path))


def export_neutral_card_file(
    record: CharacterRecord,
    export_card_path: PathLike,
    settings: Optional[CardSettings] = None
) -> None:
    card_png = export_neutral_card_bytes(record, settings)
    PNGMetadataHandler.save_image(card_png, str(export_card_path))
