"""
Character Card Data Models
=========================

Canonical in-memory character record shared by every import and export path.
"""

from pathlib import Path
from typing import Optional, Any

from pydantic import BaseModel, ConfigDict, field_validator

from .errors import InvalidImagePathError


class CharacterRecord(BaseModel):
    """
    A character persona.

    Text fields are never None (missing values become empty strings).
    image_path and created_time stay None until explicitly set.
    """

    model_config = ConfigDict(validate_assignment=True)

    name: str = ""
    summary: str = ""
    personality: str = ""
    scenario: str = ""
    greeting_message: str = ""
    example_messages: str = ""

    # Portrait the card is embedded into; bytes are re-read at export time
    image_path: Optional[str] = None

    # Milliseconds since epoch, only when the source carried metadata.created
    created_time: Optional[int] = None

    @field_validator(
        'name', 'summary', 'personality', 'scenario',
        'greeting_message', 'example_messages',
        mode='before',
    )
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator('image_path', mode='before')
    @classmethod
    def validate_image_path(cls, v: Any) -> Any:
        """Only existing .png files can back a character card."""
        if v is None:
            return None
        path = Path(v)
        if path.suffix.lower() != '.png':
            # Raised as-is: pydantic only wraps ValueError/AssertionError
            raise InvalidImagePathError(str(v), "the file must have a .png extension")
        if not path.exists():
            raise InvalidImagePathError(str(v), "the file does not exist")
        if not path.is_file():
            raise InvalidImagePathError(str(v), "the path is not a regular file")
        return str(v)

    @property
    def data_summary(self) -> str:
        """Human-readable dump of every field, for diagnostics."""
        lines = [
            f"Name: {self.name}",
            f"Summary: {self.summary}",
            f"Personality: {self.personality}",
            f"Scenario: {self.scenario}",
            f"Greeting Message: {self.greeting_message}",
            f"Example Messages: \n{self.example_messages}",
            f"Image Path: {self.image_path if self.image_path is not None else 'None'}",
        ]
        return "\n".join(lines)

    @property
    def persona(self) -> str:
        """Personality, or the summary when no personality was written."""
        return self.personality if self.personality else self.summary

    # Convenience wrappers around the card exporter

    def export_json(self, format_type: str) -> str:
        from .card_exporter import export_json
        return export_json(self, format_type)

    def export_neutral_json(self, include_metadata: bool = True) -> str:
        from .card_exporter import export_neutral_json
        return export_neutral_json(self, include_metadata=include_metadata)

    def export_json_file(self, format_type: str, export_json_path: str) -> None:
        from .card_exporter import export_json_file
        export_json_file(self, format_type, export_json_path)

    def export_neutral_json_file(self, export_json_path: str) -> None:
        from .card_exporter import export_neutral_json_file
        export_neutral_json_file(self, export_json_path)

    def export_yaml(self, format_type: str) -> str:
        from .card_exporter import export_yaml
        return export_yaml(self, format_type)

    def export_neutral_yaml(self) -> str:
        from .card_exporter import export_neutral_yaml
        return export_neutral_yaml(self)

    def export_yaml_file(self, format_type: str, export_yaml_path: str) -> None:
        from .card_exporter import export_yaml_file
        export_yaml_file(self, format_type, export_yaml_path)

    def export_neutral_yaml_file(self, export_yaml_path: str) -> None:
        from .card_exporter import export_neutral_yaml_file
        export_neutral_yaml_file(self, export_yaml_path)

    def export_card_bytes(self, format_type: str) -> bytes:
        from .card_exporter import export_card_bytes
        return export_card_bytes(self, format_type)

    def export_neutral_card_bytes(self) -> bytes:
        from .card_exporter import export_neutral_card_bytes
        return export_neutral_card_bytes(self)

    def export_card_file(self, format_type: str, export_card_path: str) -> None:
        from .card_exporter import export_card_file
        export_card_file(self, format_type, export_card_path)

    def export_neutral_card_file(self, export_card_path: str) -> None:
        from .card_exporter import export_neutral_card_file
        export_neutral_card_file(self, export_card_path)


def create_character(
    name: str,
    summary: str,
    personality: str,
    scenario: str,
    greeting_message: str,
    example_messages: str,
    image_path: Optional[str] = None,
) -> CharacterRecord:
    """Build a record from explicit field values."""
    return CharacterRecord(
        name=name,
        summary=summary,
        personality=personality,
        scenario=scenario,
        greeting_message=greeting_message,
        example_messages=example_messages,
        image_path=image_path,
    )
