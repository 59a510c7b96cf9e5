"""
aichar - Character card toolkit

Create, import and export AI character personas as JSON, YAML and
PNG character cards (TavernAI/SillyTavern, TextGenerationWebUI/Pygmalion,
AICompanion).
"""

__version__ = "1.0.0"

from .services.character_cards import *  # noqa: E402,F401,F403
from .services.character_cards import __all__ as _card_api  # noqa: E402

__all__ = ["__version__", *_card_api]
