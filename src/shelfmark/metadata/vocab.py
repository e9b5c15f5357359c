# ABOUTME: Closed vocabularies for enumerated metadata fields (age rating, manga status).
# ABOUTME: resolve() maps a raw token to an enum member, or None when unrecognized.

from enum import Enum
from typing import TypeVar

E = TypeVar("E", bound=Enum)


class AgeRating(str, Enum):
    """ComicInfo AgeRating vocabulary."""

    UNKNOWN = "Unknown"
    ADULTS_ONLY_18 = "Adults Only 18+"
    EARLY_CHILDHOOD = "Early Childhood"
    EVERYONE = "Everyone"
    EVERYONE_10 = "Everyone 10+"
    G = "G"
    KIDS_TO_ADULTS = "Kids to Adults"
    M = "M"
    MA_15 = "MA15+"
    MATURE_17 = "Mature 17+"
    PG = "PG"
    R_18 = "R18+"
    RATING_PENDING = "Rating Pending"
    TEEN = "Teen"
    X_18 = "X18+"


class MangaStatus(str, Enum):
    """ComicInfo Manga vocabulary."""

    UNKNOWN = "Unknown"
    NO = "No"
    YES = "Yes"
    YES_AND_RIGHT_TO_LEFT = "YesAndRightToLeft"


def resolve(enum_cls: type[E], token: str | None) -> E | None:
    """Look up a vocabulary member by its exact token value."""
    if token is None:
        return None
    try:
        return enum_cls(token)
    except ValueError:
        return None
