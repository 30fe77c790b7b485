"""
Output Policy - post-generation content checks

A validator inspects a generated reply and reports whether it satisfies the
output policy. The failover controller treats a violation as a cue for one
regeneration; it is a best-effort correction, not an enforcement gate.

Validators are pluggable: anything implementing OutputValidator can replace
the default heuristic without touching the controller.
"""

import re
from abc import ABC, abstractmethod

# Diacritics common in French and absent from English prose
FRENCH_MARKERS = re.compile(r"[àâçéèêëîïôûùüÿœ]", re.IGNORECASE)


class OutputValidator(ABC):
    """Checks a reply against a content policy."""

    @abstractmethod
    def validate(self, text: str) -> bool:
        """Return True if text satisfies the policy."""
        ...


class EnglishOnlyValidator(OutputValidator):
    """
    Flags replies containing French diacritics.

    This is a fast heuristic: accented proper names trigger it and
    unaccented French passes it.

    Example:
        >>> EnglishOnlyValidator().validate("Hello")
        True
        >>> EnglishOnlyValidator().validate("Bonjour, ça va ?")
        False
    """

    def validate(self, text: str) -> bool:
        return FRENCH_MARKERS.search(text) is None


class AllowAllValidator(OutputValidator):
    """Accepts every reply; disables the regeneration step."""

    def validate(self, text: str) -> bool:
        return True
