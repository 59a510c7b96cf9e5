"""
Tests for the dialect codec.

Tests cover:
- Import fallback chains and their precedence
- Dialect identifier resolution and aliases
- Export field tables and the persona fallback
- The metadata provenance block
"""

import pytest

from aichar.config import CardSettings, ToolInfo
from aichar.services.character_cards import (
    CharacterRecord,
    Dialect,
    DialectCodec,
    InvalidCharacterDataError,
    UnsupportedFormatError,
    resolve_dialect,
)


class TestImportChains:
    """Field resolution when reading documents."""

    def test_primary_key_wins(self):
        record = DialectCodec.from_document({"char_name": "A", "name": "B"})
        assert record.name == "A"

    def test_fallback_key(self):
        record = DialectCodec.from_document({"name": "B"})
        assert record.name == "B"

    def test_null_primary_falls_through(self):
        record = DialectCodec.from_document({"char_name": None, "name": "B"})
        assert record.name == "B"

    def test_empty_primary_is_not_null(self):
        record = DialectCodec.from_document({"char_name": "", "name": "B"})
        assert record.name == ""

    def test_summary_preferred_over_description(self):
        record = DialectCodec.from_document({"summary": "S", "description": "D"})
        assert record.summary == "S"

        record = DialectCodec.from_document({"description": "D"})
        assert record.summary == "D"

    def test_textgen_document(self):
        record = DialectCodec.from_document({
            "char_name": "Nova",
            "char_persona": "Curious",
            "world_scenario": "A ship",
            "char_greeting": "Hi",
            "example_dialogue": "<START>",
        })

        assert record.name == "Nova"
        assert record.personality == "Curious"
        assert record.scenario == "A ship"
        assert record.greeting_message == "Hi"
        assert record.example_messages == "<START>"
        assert record.summary == ""

    def test_tavern_document(self):
        record = DialectCodec.from_document({
            "name": "Nova",
            "description": "Navigator",
            "personality": "Curious",
            "scenario": "A ship",
            "first_mes": "Hi",
            "mes_example": "<START>",
        })

        assert record.summary == "Navigator"
        assert record.personality == "Curious"
        assert record.greeting_message == "Hi"
        assert record.example_messages == "<START>"

    def test_missing_fields_default_to_empty(self):
        record = DialectCodec.from_document({})
        assert record.name == ""
        assert record.scenario == ""
        assert record.created_time is None
        assert record.image_path is None

    def test_scalar_values_become_text(self):
        record = DialectCodec.from_document({"name": 42, "scenario": True})
        assert record.name == "42"
        assert record.scenario == "True"

    def test_nested_value_rejected(self):
        with pytest.raises(InvalidCharacterDataError, match="first_mes"):
            DialectCodec.from_document({"first_mes": ["a", "b"]})

    def test_non_mapping_rejected(self):
        with pytest.raises(InvalidCharacterDataError):
            DialectCodec.from_document(["name", "Nova"])

    def test_created_time(self):
        record = DialectCodec.from_document({"name": "N", "metadata": {"created": 1700000000000}})
        assert record.created_time == 1700000000000

    def test_created_time_ignores_non_integers(self):
        for value in ("1700000000000", True, 1.5, None):
            record = DialectCodec.from_document({"metadata": {"created": value}})
            assert record.created_time is None

    def test_image_path_never_read(self):
        record = DialectCodec.from_document({"name": "N", "image_path": "/tmp/x.png"})
        assert record.image_path is None


class TestResolveDialect:
    """Format identifier handling."""

    @pytest.mark.parametrize("identifier,expected", [
        ("tavernai", Dialect.TAVERNAI),
        ("SillyTavern", Dialect.TAVERNAI),
        ("TextGenerationWebUI", Dialect.TEXTGENERATIONWEBUI),
        ("PYGMALION", Dialect.TEXTGENERATIONWEBUI),
        ("aicompanion", Dialect.AICOMPANION),
        ("  tavernai ", Dialect.TAVERNAI),
    ])
    def test_aliases(self, identifier, expected):
        assert resolve_dialect(identifier) is expected

    def test_unknown_identifier(self):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            resolve_dialect("bogus")

        message = str(exc_info.value)
        assert "bogus" in message
        for name in ("tavernai", "sillytavern", "textgenerationwebui", "pygmalion", "aicompanion"):
            assert f"'{name}'" in message
        assert exc_info.value.format_type == "bogus"

    def test_neutral_identifier(self):
        assert resolve_dialect("Neutral") is Dialect.NEUTRAL


class TestExportDocuments:
    """Export field tables."""

    def test_tavern_keys(self, character):
        document = DialectCodec.to_document(character, Dialect.TAVERNAI, now_ms=1)
        assert list(document) == [
            "name", "description", "personality", "scenario", "first_mes", "mes_example", "metadata",
        ]
        assert document["description"] == character.summary
        assert document["personality"] == character.personality

    def test_textgen_keys(self, character):
        document = DialectCodec.to_document(character, Dialect.TEXTGENERATIONWEBUI, now_ms=1)
        assert list(document) == [
            "char_name", "char_persona", "world_scenario", "char_greeting", "example_dialogue", "metadata",
        ]
        assert document["char_persona"] == character.personality

    def test_aicompanion_keys(self, character):
        document = DialectCodec.to_document(character, Dialect.AICOMPANION, now_ms=1)
        assert list(document) == ["name", "description", "first_mes", "mes_example", "metadata"]
        assert document["description"] == character.personality

    def test_neutral_keys(self, character):
        document = DialectCodec.to_document(character, Dialect.NEUTRAL, now_ms=1)
        assert list(document) == [
            "char_name", "char_persona", "world_scenario", "char_greeting", "example_dialogue",
            "name", "description", "personality", "scenario", "first_mes", "mes_example",
            "metadata",
        ]
        assert document["char_name"] == document["name"] == character.name
        assert document["description"] == character.summary

    def test_persona_fallback(self):
        record = CharacterRecord(name="N", summary="Only a summary")

        textgen = DialectCodec.to_document(record, Dialect.TEXTGENERATIONWEBUI)
        aicompanion = DialectCodec.to_document(record, Dialect.AICOMPANION)
        tavern = DialectCodec.to_document(record, Dialect.TAVERNAI)
        neutral = DialectCodec.to_document(record, Dialect.NEUTRAL)

        assert textgen["char_persona"] == "Only a summary"
        assert aicompanion["description"] == "Only a summary"
        assert tavern["description"] == "Only a summary"
        assert tavern["personality"] == ""
        assert neutral["char_persona"] == "Only a summary"
        assert neutral["personality"] == ""

    def test_without_metadata(self, character):
        document = DialectCodec.to_document(character, Dialect.NEUTRAL, include_metadata=False)
        assert "metadata" not in document

    def test_export_does_not_mutate(self, character):
        before = character.model_dump()
        DialectCodec.to_document(character, Dialect.AICOMPANION)
        DialectCodec.to_document(CharacterRecord(summary="x"), Dialect.TEXTGENERATIONWEBUI)
        assert character.model_dump() == before


class TestMetadata:
    """Provenance block."""

    def test_fresh_record(self, character):
        metadata = DialectCodec.build_metadata(character, now_ms=1234)

        assert metadata["version"] == 1
        assert metadata["created"] == 1234
        assert metadata["modified"] == 1234
        assert metadata["source"] is None
        assert metadata["tool"]["name"] == "aichar"
        assert metadata["tool"]["url"].startswith("https://")
        assert "version" in metadata["tool"]

    def test_keeps_created_time(self, character):
        character.created_time = 1000
        metadata = DialectCodec.build_metadata(character, now_ms=5000)

        assert metadata["created"] == 1000
        assert metadata["modified"] == 5000

    def test_uses_clock(self, character):
        first = DialectCodec.build_metadata(character)
        second = DialectCodec.build_metadata(character)

        assert first["modified"] > 1_500_000_000_000
        assert second["modified"] >= first["modified"]

    def test_settings_override(self, character):
        settings = CardSettings(
            metadata_version=2,
            tool=ToolInfo(name="my-tool", version="9.9", url="https://example.com/tool/"),
        )
        metadata = DialectCodec.build_metadata(character, now_ms=1, settings=settings)

        assert metadata["version"] == 2
        assert metadata["tool"] == {"name": "my-tool", "version": "9.9", "url": "https://example.com/tool"}
