import re
import unicodedata

from geoquiz.models import Entity

_SEPARATORS = re.compile(r'[\W_]+')


def normalize(value: str) -> str:
    """Fold a free-text answer for comparison.

    Lowercases, strips accents, turns runs of punctuation and whitespace into
    one space and trims, so "Côte-d'Ivoire " becomes "cote d ivoire".
    """
    decomposed = unicodedata.normalize('NFKD', value.lower())
    stripped = ''.join(ch for ch in decomposed if not unicodedata.combining(ch))
    # compatibility forms (roman numerals, fullwidth) may decompose to uppercase
    return _SEPARATORS.sub(' ', stripped.lower()).strip()


def is_match(guess: str, entity: Entity) -> bool:
    normalized = normalize(guess)
    if not normalized:
        return False
    if normalized == normalize(entity.canonical_name):
        return True
    return any(normalized == normalize(alt) for alt in entity.alt_names)
