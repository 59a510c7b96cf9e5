"""
Character Card System
====================

Character persona records and their conversion between formats.

Supports:
- Generic JSON / YAML documents
- TavernAI / SillyTavern, TextGenerationWebUI / Pygmalion and AICompanion dialects
- PNG character cards (base64 JSON in a 'chara' text chunk)
"""

from .models import CharacterRecord, create_character
from .dialects import Dialect, SUPPORTED_FORMATS, resolve_dialect
from .dialect_codec import DialectCodec
from .metadata_handler import PNGMetadataHandler
from .card_importer import (
    CharacterCardImporter,
    load_from_json,
    load_from_json_file,
    load_from_yaml,
    load_from_yaml_file,
    load_from_card_bytes,
    load_from_card_file,
)
from .card_exporter import (
    CharacterCardExporter,
    export_json,
    export_neutral_json,
    export_json_file,
    export_neutral_json_file,
    export_yaml,
    export_neutral_yaml,
    export_yaml_file,
    export_neutral_yaml_file,
    export_card_bytes,
    export_neutral_card_bytes,
    export_card_file,
    export_neutral_card_file,
)
from .errors import (
    CharacterCardError,
    UnsupportedFormatError,
    InvalidImagePathError,
    MissingImageError,
    PngDecodeError,
    PngEncodeError,
    ChunkNotFoundError,
    Base64DecodeError,
    Utf8DecodeError,
    JsonParseError,
    YamlParseError,
    InvalidCharacterDataError,
)

__all__ = [
    'CharacterRecord',
    'create_character',
    'Dialect',
    'SUPPORTED_FORMATS',
    'resolve_dialect',
    'DialectCodec',
    'PNGMetadataHandler',
    'CharacterCardImporter',
    'CharacterCardExporter',
    'load_from_json',
    'load_from_json_file',
    'load_from_yaml',
    'load_from_yaml_file',
    'load_from_card_bytes',
    'load_from_card_file',
    'export_json',
    'export_neutral_json',
    'export_json_file',
    'export_neutral_json_file',
    'export_yaml',
    'export_neutral_yaml',
    'export_yaml_file',
    'export_neutral_yaml_file',
    'export_card_bytes',
    'export_neutral_card_bytes',
    'export_card_file',
    'export_neutral_card_file',
    'CharacterCardError',
    'UnsupportedFormatError',
    'InvalidImagePathError',
    'MissingImageError',
    'PngDecodeError',
    'PngEncodeError',
    'ChunkNotFoundError',
    'Base64DecodeError',
    'Utf8DecodeError',
    'JsonParseError',
    'YamlParseError',
    'InvalidCharacterDataError',
]
