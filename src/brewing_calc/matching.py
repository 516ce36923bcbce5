"""
Fuzzy name matching for catalog presets.

Uses RapidFuzz token-sort scoring so word order does not matter
("Otter, Maris" finds "Maris Otter"), with an alias table for common
brewing shorthand. Scores are reported as 0.0 to 1.0.
"""

from collections.abc import Callable, Sequence
from typing import TypeVar

from rapidfuzz import fuzz, process

T = TypeVar("T")

DEFAULT_THRESHOLD = 0.7

# canonical name -> accepted aliases (all lower case)
INGREDIENT_ALIASES: dict[str, list[str]] = {
    # Fermentables
    "2-row": ["two-row", "2 row", "2-row pale", "american 2-row", "us 2-row", "pale 2-row"],
    "pilsner": ["pils", "pilsner malt", "pilsen", "pils malt", "german pilsner"],
    "pale ale malt": ["pale ale", "pale malt", "uk pale"],
    "maris otter": ["maris otter pale", "mo", "marris otter"],
    "munich": ["munich malt", "münchner", "munchner", "munich i", "munich ii"],
    "vienna": ["vienna malt", "wiener"],
    "crystal 20": ["caramel 20", "c20", "crystal 20l", "caramel 20l"],
    "crystal 40": ["caramel 40", "c40", "crystal 40l", "caramel 40l"],
    "crystal 60": ["caramel 60", "c60", "crystal 60l", "caramel 60l"],
    "chocolate malt": ["chocolate", "choc malt"],
    "black malt": ["black patent", "black patent malt"],
    "roasted barley": ["roast barley"],
    "acidulated malt": ["acid malt", "sauermalz"],
    "wheat malt": ["wheat", "malted wheat", "weizenmalz"],
    "flaked oats": ["oats", "oat flakes", "rolled oats"],
    "dextrose": ["corn sugar", "glucose"],
    "table sugar": ["sucrose", "cane sugar"],
    "light dme": ["light dry malt extract", "extra light dme", "pale dme"],
    # Hops
    "cascade": ["cascade (us)", "us cascade"],
    "centennial": ["centennial (us)"],
    "citra": ["citra (us)"],
    "mosaic": ["mosaic (us)"],
    "simcoe": ["simcoe (us)"],
    "amarillo": ["amarillo (us)"],
    "columbus": ["ctz", "tomahawk", "zeus", "columbus/tomahawk/zeus"],
    "galaxy": ["galaxy (au)", "australian galaxy"],
    "nelson sauvin": ["nelson", "nelson sauvin (nz)"],
    "saaz": ["czech saaz", "saazer"],
    "hallertau mittelfrüh": ["hallertau", "hallertauer", "hallertauer mittelfruh"],
    "east kent goldings": ["ekg", "kent goldings", "goldings"],
    "fuggle": ["fuggles"],
    # Yeasts
    "us-05": ["safale us-05", "us05", "fermentis us-05", "chico"],
    "s-04": ["safale s-04", "s04", "fermentis s-04"],
    "w-34/70": ["saflager w-34/70", "w34/70", "34/70"],
    "nottingham": ["lallemand nottingham", "danstar nottingham"],
    "wlp001": ["california ale", "wyeast 1056", "1056"],
    "london ale iii": ["wyeast 1318", "1318"],
}

_ALIAS_TO_CANONICAL: dict[str, str] = {
    alias: canonical
    for canonical, aliases in INGREDIENT_ALIASES.items()
    for alias in aliases
}


def normalise_ingredient_name(name: str) -> str:
    """
    Reduce an ingredient name to its canonical lower-case form.

    Example:
        >>> normalise_ingredient_name("Safale US-05")
        'us-05'
        >>> normalise_ingredient_name("  Citra ")
        'citra'
    """
    key = name.lower().strip()
    if key in INGREDIENT_ALIASES:
        return key
    return _ALIAS_TO_CANONICAL.get(key, key)


def match_names(
    query: str,
    candidates: Sequence[str],
    threshold: float = DEFAULT_THRESHOLD,
    limit: int = 5,
) -> list[tuple[str, float]]:
    """
    Fuzzy match a query against candidate names.

    Args:
        query: Name to look for
        candidates: Names to match against
        threshold: Minimum score (0.0 to 1.0)
        limit: Maximum number of results

    Returns:
        (candidate, score) tuples at or above threshold, best first
    """
    if not candidates or not query or not query.strip():
        return []

    results = process.extract(
        query.lower(),
        [c.lower() for c in candidates],
        scorer=fuzz.token_sort_ratio,
        limit=limit,
    )
    return [
        (candidates[index], score / 100)
        for _, score, index in results
        if score / 100 >= threshold
    ]


def match_objects(
    query: str,
    candidates: Sequence[T],
    key: Callable[[T], str],
    threshold: float = DEFAULT_THRESHOLD,
    limit: int = 5,
) -> list[tuple[T, float]]:
    """
    Fuzzy match a query against objects by a name extracted with ``key``.

    The query is first resolved through the alias table, so "ctz" finds a
    preset named "Columbus".
    """
    if not candidates or not query or not query.strip():
        return []

    canonical = normalise_ingredient_name(query)
    names = [key(obj) for obj in candidates]
    scored: dict[int, float] = {}

    for i, name in enumerate(names):
        if normalise_ingredient_name(name) == canonical:
            scored[i] = 1.0

    for text in {query, canonical}:
        for name, score in match_names(text, names, threshold, limit=len(names)):
            for i, candidate in enumerate(names):
                if candidate == name and score > scored.get(i, 0.0):
                    scored[i] = score

    ranked = sorted(scored.items(), key=lambda kv: kv[1], reverse=True)
    return [(candidates[i], score) for i, score in ranked[:limit]]


def best_match_object(
    query: str,
    candidates: Sequence[T],
    key: Callable[[T], str],
    threshold: float = DEFAULT_THRESHOLD,
) -> tuple[T, float] | None:
    """Get the single best matching object, or None below threshold."""
    matches = match_objects(query, candidates, key, threshold, limit=1)
    return matches[0] if matches else None


def suggest_names(
    query: str,
    candidates: Sequence[str],
    limit: int = 5,
) -> list[str]:
    """Loose suggestions for autocomplete."""
    return [name for name, _ in match_names(query, candidates, threshold=0.4, limit=limit)]
