"""
ID generator

Prefixed ULID identifiers for every entity
"""

import ulid


def generate_ulid() -> str:
    """
    Generate a ULID (Universally Unique Lexicographically Sortable Identifier)

    - 128-bit compatible
    - sortable by creation time
    - canonical 26 character string

    Returns:
        ULID string
    """
    return str(ulid.new())


def generate_user_id() -> str:
    """
    Generate a user ID

    Format: user_<ulid>
    Example: user_01ARZ3NDEKTSV4RRFFQ69G5FAV

    Returns:
        User ID
    """
    return f"user_{generate_ulid()}"


def generate_comment_id() -> str:
    """
    Generate a comment ID

    Format: comment_<ulid>

    Returns:
        Comment ID
    """
    return f"comment_{generate_ulid()}"


def generate_vote_id() -> str:
    """Generate a comment vote ID (vote_<ulid>)"""
    return f"vote_{generate_ulid()}"


def generate_reaction_id() -> str:
    """Generate a comment reaction ID (reaction_<ulid>)"""
    return f"reaction_{generate_ulid()}"


def generate_user_game_id() -> str:
    """Generate a library entry ID (ugame_<ulid>)"""
    return f"ugame_{generate_ulid()}"


def generate_affiliate_link_id() -> str:
    return f"aff_{generate_ulid()}"
