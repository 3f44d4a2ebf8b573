"""
Utility helpers for player name handling and cache key derivation.
"""
import re
from typing import Any, Optional

# Lounge game identifiers
GAME_12P = "mkworld12p"
GAME_24P = "mkworld24p"

PLAYER_NAME_PATTERN = re.compile(r"^[A-Za-z0-9 ._-]+$")


def safe_lower(value: Any) -> str:
    """
    Safely lowercase a value, handling None.

    Args:
        value: Any value to lowercase

    Returns:
        Lowercased string or empty string if None
    """
    if value is None:
        return ""
    return str(value).lower()


def safe_strip(value: Any) -> str:
    """
    Safely strip whitespace from a value, handling None.

    Args:
        value: Any value to strip

    Returns:
        Stripped string or empty string if None
    """
    if value is None:
        return ""
    return str(value).strip()


def upstream_game(game: Optional[str]) -> str:
    """Map the client's game variant ("12p" or anything else) to a Lounge game id."""
    if game == "12p":
        return GAME_12P
    return GAME_24P


def cache_key(name: str, game: Optional[str]) -> str:
    """
    Derive the canonical cache key for a player query.

    Names differing only in case or surrounding whitespace share a key.

    Args:
        name: Player name as received from the client
        game: Game variant ("12p" or None/anything else for 24p)

    Returns:
        Key of the form "<lowercased name>:<lounge game id>"
    """
    return f"{safe_lower(safe_strip(name))}:{upstream_game(game)}"


def is_valid_player_name(name: str) -> bool:
    """Check that a (trimmed) name only has letters, digits, spaces, '.', '_' or '-'."""
    return bool(name) and PLAYER_NAME_PATTERN.fullmatch(name) is not None
