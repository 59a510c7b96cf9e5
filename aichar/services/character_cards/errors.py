"""
Character Card Errors
====================

Exception hierarchy for character card import and export.
"""

from typing import Iterable, Optional


class CharacterCardError(Exception):
    """Base exception for character card errors."""
    pass


class UnsupportedFormatError(CharacterCardError):
    """Export requested for a dialect we don't know."""

    def __init__(self, format_type: str, supported: Iterable[str]):
        self.format_type = format_type
        self.supported = tuple(supported)
        listed = ", ".join(f"'{name}'" for name in self.supported)
        super().__init__(
            f"Format '{format_type}' not supported, supported formats: {listed}"
        )


class InvalidImagePathError(CharacterCardError):
    """image_path does not point at an existing .png file."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid image path '{path}': {reason}")


class MissingImageError(CharacterCardError):
    """Card export attempted without an image to embed into."""

    def __init__(self):
        super().__init__(
            "To export a character as a character card, you must provide a png file "
            "that will hold the encoded data. Set it on the record with: "
            "character.image_path = \"png/file/path.png\""
        )


class PngDecodeError(CharacterCardError):
    """The PNG library could not decode the source image."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"{message} (file: {path})"
        super().__init__(message)


class PngEncodeError(CharacterCardError):
    """The PNG library could not write the card image."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"{message} (file: {path})"
        super().__init__(message)


class ChunkNotFoundError(CharacterCardError):
    """No character payload found in the PNG data."""

    def __init__(self, keyword: str = "chara", path: Optional[str] = None):
        self.keyword = keyword
        self.path = path
        source = f"'{path}'" if path else "the provided image data"
        super().__init__(
            f"No character data found in {source}: there is no '{keyword}' text chunk.\n"
            "Possible causes:\n"
            "  - the image is not a character card (a plain PNG or another image type)\n"
            "  - the file is corrupted or was re-saved by a tool that strips metadata\n"
            "  - the card uses an unsupported format\n"
            "What you can do:\n"
            "  - check that the file is the original PNG card and not a screenshot or conversion\n"
            "  - re-export the card from the application that created it\n"
            "  - open the card in its original tool to confirm it contains character data"
        )


class Base64DecodeError(CharacterCardError):
    """Card payload is not valid base64."""
    pass


class Utf8DecodeError(CharacterCardError):
    """Decoded card payload is not valid UTF-8 text."""
    pass


class JsonParseError(CharacterCardError):
    """Character JSON could not be parsed."""
    pass


class YamlParseError(CharacterCardError):
    """Character YAML could not be parsed."""
    pass


class InvalidCharacterDataError(CharacterCardError):
    """Parsed document has a shape we can't read character fields from."""
    pass
