import re
from dataclasses import dataclass

# ---------- Card line parsing ----------

_DASH_SEPARATOR = " - "
_UNSAFE_FILENAME = re.compile(r"[^a-z0-9_\-]", re.IGNORECASE)


@dataclass
class ParsedLines:
    pairs: list[tuple[str, str]]
    skipped: list[str]


def parse_card_line(line: str) -> tuple[str, str] | None:
    """Parse a single line from a text import.

    Accepts tab-separated lines (Anki plain-text export: Front\\tBack[\\tTags...])
    and dash-separated lines (Word - Translation).
    Returns (word, translation) or None if the line cannot be parsed.
    """
    # Tab-separated: first two fields only, extra fields (tags) are ignored
    tab_idx = line.find("\t")
    if tab_idx > 0:
        word = line[:tab_idx].strip()
        translation = line[tab_idx + 1 :].split("\t")[0].strip()
        if word and translation:
            return word, translation

    dash_idx = line.find(_DASH_SEPARATOR)
    if dash_idx > 0:
        word = line[:dash_idx].strip()
        translation = line[dash_idx + len(_DASH_SEPARATOR) :].strip()
        if word and translation:
            return word, translation

    return None


def parse_card_lines(text: str) -> ParsedLines:
    """Parse a block of text into word/translation pairs.

    Blank lines and '#' lines (Anki export headers) are ignored, not skipped.
    """
    result = ParsedLines(pairs=[], skipped=[])
    for line in text.splitlines():
        if not line.strip() or line.startswith("#"):
            continue
        parsed = parse_card_line(line)
        if parsed:
            result.pairs.append(parsed)
        else:
            result.skipped.append(line)
    return result


def format_card_line(word: str, translation: str) -> str:
    """Tab-separated line, readable by parse_card_line and by Anki."""
    return f"{word}\t{translation}"


# ---------- Naming ----------


def safe_filename(name: str) -> str:
    """Replace everything except letters, digits, '_' and '-' with '_'."""
    return _UNSAFE_FILENAME.sub("_", name)
