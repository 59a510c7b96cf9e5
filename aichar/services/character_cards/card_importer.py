"""
Character Card Importer
======================

Load characters from JSON, YAML and PNG character cards.
"""

import json
import yaml
import logging
from pathlib import Path
from typing import Optional, Union

from .dialect_codec import DialectCodec
from .errors import InvalidImagePathError, JsonParseError, YamlParseError
from .metadata_handler import PNGMetadataHandler
from .models import CharacterRecord
from ...config import CardSettings, get_settings

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_text_file(path: PathLike) -> str:
    with open(path, 'r', encoding='utf-8-sig') as f:
        return f.read()


class CharacterCardImporter:
    """Import characters into CharacterRecord."""

    def __init__(self, settings: Optional[CardSettings] = None):
        """
        Initialize importer.

        Args:
            settings: Card settings (defaults to the active settings)
        """
        self.settings = settings or get_settings()

    def from_json(self, text: str) -> CharacterRecord:
        """
        Load a character from JSON text in any supported dialect.

        Raises:
            JsonParseError: Text is not valid JSON
            InvalidCharacterDataError: JSON is not an object of text fields
        """
        try:
            document = json.loads(text.lstrip('\ufeff'))
        except json.JSONDecodeError as e:
            raise JsonParseError(f"Error while parsing character JSON: {e}") from e

        return DialectCodec.from_document(document)

    def from_json_file(self, path: PathLike) -> CharacterRecord:
        """Load a character from a JSON file. I/O errors propagate."""
        record = self.from_json(_read_text_file(path))
        logger.info(f"Loaded character '{record.name}' from {path}")
        return record

    def from_yaml(self, text: str) -> CharacterRecord:
        """
        Load a character from YAML text in any supported dialect.

        Raises:
            YamlParseError: Text is not valid YAML
            InvalidCharacterDataError: YAML is not a mapping of text fields
        """
        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise YamlParseError(f"Error while parsing character YAML: {e}") from e

        return DialectCodec.from_document(document)

    def from_yaml_file(self, path: PathLike) -> CharacterRecord:
        """Load a character from a YAML file. I/O errors propagate."""
        record = self.from_yaml(_read_text_file(path))
        logger.info(f"Loaded character '{record.name}' from {path}")
        return record

    def from_card_bytes(self, png_data: bytes, path: Optional[str] = None) -> CharacterRecord:
        """
        Load a character from PNG character card data.

        Args:
            png_data: Card file contents
            path: Source file, for error messages

        Raises:
            ChunkNotFoundError: No character payload in the data
            Base64DecodeError: Payload is not base64
            Utf8DecodeError: Decoded payload is not UTF-8
            JsonParseError: Payload is not JSON
        """
        payload = PNGMetadataHandler.extract_payload(
            png_data,
            keyword=self.settings.chunk_keyword,
            fallback_scan=self.settings.fallback_scan,
            path=path,
        )
        text = PNGMetadataHandler.decode_payload(payload)

        try:
            document = json.loads(text.lstrip('\ufeff'))
        except json.JSONDecodeError as e:
            raise JsonParseError(f"Character card does not contain valid JSON data: {e}") from e

        return DialectCodec.from_document(document)

    def from_card_file(self, path: PathLike) -> CharacterRecord:
        """
        Load a character from a PNG card file.

        The returned record's image_path points at the card itself.

        Raises:
            InvalidImagePathError: Path is not a .png file
            (plus everything from_card_bytes raises)
        """
        path = str(path)
        if Path(path).suffix.lower() != '.png':
            raise InvalidImagePathError(path, "the file must have a .png extension")

        png_data = PNGMetadataHandler.extract_image(path)
        record = self.from_card_bytes(png_data, path=path)
        record.image_path = path

        logger.info(f"Loaded character card '{record.name}' from {path}")
        return record


def load_from_json(text: str, settings: Optional[CardSettings] = None) -> CharacterRecord:
    return CharacterCardImporter(settings).from_json(text)


def load_from_json_file(path: PathLike, settings: Optional[CardSettings] = None) -> CharacterRecord:
    return CharacterCardImporter(settings).from_json_file(path)


def load_from_yaml(text: str, settings: Optional[CardSettings] = None) -> CharacterRecord:
    return CharacterCardImporter(settings).from_yaml(text)


def load_from_yaml_file(path: PathLike, settings: Optional[CardSettings] = None) -> CharacterRecord:
    return CharacterCardImporter(settings).from_yaml_file(path)


def load_from_card_bytes(png_data: bytes, settings: Optional[CardSettings] = None) -> CharacterRecord:
    return CharacterCardImporter(settings).from_card_bytes(png_data)


def load_from_card_file(path: PathLike, settings: Optional[CardSettings] = None) -> CharacterRecord:
    return CharacterCardImporter(settings).from_card_file(path)
