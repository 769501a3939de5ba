# Display helpers for category names and factor values
import re

_WORD_SPLIT = re.compile(r"[\s_-]+")


def to_title_case(text: str) -> str:
    """
    Lower-case the whole string, split on whitespace/underscore/hyphen runs and
    capitalize each piece: "extra therapeutic_factors-b" -> "Extra Therapeutic Factors B".
    """
    words = _WORD_SPLIT.split(text.lower())
    return " ".join(w[:1].upper() + w[1:] for w in words)


def first_letter_label(name: str) -> str:
    # "treatment" -> "Treatment"; the rest of the string is left as-is
    return name[:1].upper() + name[1:]
