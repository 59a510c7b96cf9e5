"""
Card Dialects
=============

External JSON/YAML schemas a character can be exported to, and the
field tables that map the canonical record onto each of them.
"""

from enum import Enum
from typing import Dict, Tuple

from .errors import UnsupportedFormatError


class Dialect(Enum):
    """Supported export shapes."""
    NEUTRAL = "neutral"
    TAVERNAI = "tavernai"
    TEXTGENERATIONWEBUI = "textgenerationwebui"
    AICOMPANION = "aicompanion"


# Identifiers listed to users; "neutral" is also accepted
SUPPORTED_FORMATS: Tuple[str, ...] = (
    "tavernai",
    "sillytavern",
    "textgenerationwebui",
    "pygmalion",
    "aicompanion",
)

_ALIASES: Dict[str, Dialect] = {
    "neutral": Dialect.NEUTRAL,
    "tavernai": Dialect.TAVERNAI,
    "sillytavern": Dialect.TAVERNAI,
    "textgenerationwebui": Dialect.TEXTGENERATIONWEBUI,
    "pygmalion": Dialect.TEXTGENERATIONWEBUI,
    "aicompanion": Dialect.AICOMPANION,
}

# (output key, record attribute). "persona" is personality falling back to summary.
FIELD_TABLES: Dict[Dialect, Tuple[Tuple[str, str], ...]] = {
    Dialect.NEUTRAL: (
        ("char_name", "name"),
        ("char_persona", "persona"),
        ("world_scenario", "scenario"),
        ("char_greeting", "greeting_message"),
        ("example_dialogue", "example_messages"),
        ("name", "name"),
        ("description", "summary"),
        ("personality", "personality"),
        ("scenario", "scenario"),
        ("first_mes", "greeting_message"),
        ("mes_example", "example_messages"),
    ),
    Dialect.TAVERNAI: (
        ("name", "name"),
        ("description", "summary"),
        ("personality", "personality"),
        ("scenario", "scenario"),
        ("first_mes", "greeting_message"),
        ("mes_example", "example_messages"),
    ),
    Dialect.TEXTGENERATIONWEBUI: (
        ("char_name", "name"),
        ("char_persona", "persona"),
        ("world_scenario", "scenario"),
        ("char_greeting", "greeting_message"),
        ("example_dialogue", "example_messages"),
    ),
    Dialect.AICOMPANION: (
        ("name", "name"),
        ("description", "persona"),
        ("first_mes", "greeting_message"),
        ("mes_example", "example_messages"),
    ),
}

# Import side: canonical field -> source keys, first non-null wins
IMPORT_CHAINS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("name", ("char_name", "name")),
    ("summary", ("summary", "description")),
    ("personality", ("char_persona", "personality")),
    ("scenario", ("world_scenario", "scenario")),
    ("greeting_message", ("char_greeting", "first_mes")),
    ("example_messages", ("example_dialogue", "mes_example")),
)


def resolve_dialect(format_type: str) -> Dialect:
    """
    Map a user-supplied format identifier to a dialect.

    Matching is case-insensitive and ignores surrounding whitespace.

    Raises:
        UnsupportedFormatError: Unknown identifier
    """
    key = format_type.strip().lower() if isinstance(format_type, str) else ""
    dialect = _ALIASES.get(key)
    if dialect is None:
        raise UnsupportedFormatError(str(format_type), SUPPORTED_FORMATS)
    return dialect

