"""BCP-47 language tag utilities."""

import re
from typing import Iterable, Optional

UNDETERMINED = "und"

# ISO 639-2 (B and T forms) to ISO 639-1 mapping
# Subtitle filenames and providers mix both, tags are kept in the short form
ISO_639_2_TO_639_1 = {
    "eng": "en",  # English
    "spa": "es",  # Spanish
    "fre": "fr",  # French
    "fra": "fr",
    "ger": "de",  # German
    "deu": "de",
    "ita": "it",  # Italian
    "por": "pt",  # Portuguese
    "rus": "ru",  # Russian
    "jpn": "ja",  # Japanese
    "kor": "ko",  # Korean
    "chi": "zh",  # Chinese
    "zho": "zh",
    "ara": "ar",  # Arabic
    "hin": "hi",  # Hindi
    "dut": "nl",  # Dutch
    "nld": "nl",
    "pol": "pl",  # Polish
    "tur": "tr",  # Turkish
    "swe": "sv",  # Swedish
    "dan": "da",  # Danish
    "nor": "no",  # Norwegian
    "fin": "fi",  # Finnish
    "cze": "cs",  # Czech
    "ces": "cs",
    "hun": "hu",  # Hungarian
    "rum": "ro",  # Romanian
    "ron": "ro",
    "tha": "th",  # Thai
    "vie": "vi",  # Vietnamese
    "ind": "id",  # Indonesian
    "heb": "he",  # Hebrew
    "gre": "el",  # Greek
    "ell": "el",
    "ukr": "uk",  # Ukrainian
    "cat": "ca",  # Catalan
    "slo": "sk",  # Slovak
    "slk": "sk",
    "hrv": "hr",  # Croatian
    "srp": "sr",  # Serbian
    "bul": "bg",  # Bulgarian
    "lit": "lt",  # Lithuanian
    "lav": "lv",  # Latvian
    "est": "et",  # Estonian
    "slv": "sl",  # Slovenian
    "per": "fa",  # Persian
    "fas": "fa",
    "may": "ms",  # Malay
    "msa": "ms",
    "tam": "ta",  # Tamil
    "tel": "te",  # Telugu
    "ben": "bn",  # Bengali
    "mar": "mr",  # Marathi
}

LANGUAGE_NAMES = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
    "ar": "Arabic",
    "hi": "Hindi",
    "nl": "Dutch",
    "pl": "Polish",
    "tr": "Turkish",
    "sv": "Swedish",
    "da": "Danish",
    "no": "Norwegian",
    "fi": "Finnish",
    "cs": "Czech",
    "hu": "Hungarian",
    "ro": "Romanian",
    "th": "Thai",
    "vi": "Vietnamese",
    "id": "Indonesian",
    "he": "Hebrew",
    "el": "Greek",
    "uk": "Ukrainian",
    "ca": "Catalan",
    "sk": "Slovak",
    "hr": "Croatian",
    "sr": "Serbian",
    "bg": "Bulgarian",
    "lt": "Lithuanian",
    "lv": "Latvian",
    "et": "Estonian",
    "sl": "Slovenian",
    "fa": "Persian",
    "ms": "Malay",
    "ta": "Tamil",
    "te": "Telugu",
    "bn": "Bengali",
    "mr": "Marathi",
    UNDETERMINED: "Undetermined",
}

_TAG_PATTERN = re.compile(r"^[A-Za-z]{2,3}(?:[-_][A-Za-z0-9]{2,8})*$")


def normalize_tag(code: Optional[str]) -> str:
    """Normalize a language code to its canonical BCP-47 form.

    Handles 2-letter and 3-letter primary subtags, region and script subtags,
    and underscores used as separators (e.g. 'pt_br').

    Args:
        code: Language code (e.g. 'EN', 'eng', 'pt_br', 'zh-hant')

    Returns:
        Normalized tag (e.g. 'en', 'en', 'pt-BR', 'zh-Hant'), or 'und' when the
        input does not look like a language tag
    """
    if not code or not _TAG_PATTERN.match(code.strip()):
        return UNDETERMINED

    parts = re.split(r"[-_]", code.strip())
    primary = parts[0].lower()
    primary = ISO_639_2_TO_639_1.get(primary, primary)

    subtags = [primary]
    for part in parts[1:]:
        if len(part) == 2 and part.isalpha():
            subtags.append(part.upper())
        elif len(part) == 4 and part.isalpha():
            subtags.append(part.title())
        else:
            subtags.append(part.lower())

    return "-".join(subtags)


def primary_subtag(tag: str) -> str:
    """Return the primary language subtag of a normalized tag."""
    return tag.split("-", 1)[0]


def display_name(tag: str) -> str:
    """Return the English display name for a language tag.

    Args:
        tag: Language tag (normalized or not)

    Returns:
        Display name (e.g. 'English', 'Portuguese (BR)'), or the tag itself
        if the language is unknown
    """
    tag = normalize_tag(tag)
    name = LANGUAGE_NAMES.get(primary_subtag(tag))
    if name is None:
        return tag

    rest = tag.split("-", 1)[1:] if "-" in tag else []
    if rest:
        return f"{name} ({rest[0]})"
    return name


class LanguageSet(frozenset):
    """Immutable set of normalized BCP-47 tags.

    Equality and difference are tag-value based. Use ``ordered()`` when a
    deterministic iteration order is needed.
    """

    def __new__(cls, tags: Iterable[str] = ()):
        return super().__new__(cls, (normalize_tag(tag) for tag in tags))

    def ordered(self) -> list[str]:
        """Return the tags sorted alphabetically."""
        return sorted(self)

    def __sub__(self, other):
        return LanguageSet(frozenset.__sub__(self, LanguageSet(other)))

    def __or__(self, other):
        return LanguageSet(frozenset.__or__(self, LanguageSet(other)))

    def __and__(self, other):
        return LanguageSet(frozenset.__and__(self, LanguageSet(other)))

    def __repr__(self) -> str:
        return f"LanguageSet({self.ordered()!r})"


def missing(wanted: Iterable[str], present: Iterable[str]) -> LanguageSet:
    """Compute the languages that are wanted but not yet present.

    Args:
        wanted: Requested language tags
        present: Language tags of subtitles already available

    Returns:
        LanguageSet of wanted tags not in present (empty when nothing is missing)
    """
    return LanguageSet(wanted) - LanguageSet(present)

