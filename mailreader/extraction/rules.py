from dataclasses import dataclass
from functools import lru_cache

from mailreader.core.config import Settings, settings


@dataclass(frozen=True)
class ExtractionRules:
    """Product heuristics consumed by the link extractor.

    Patterns and hosts are stored lower-case; matching is case-insensitive.
    """

    tracking_params: frozenset[str]
    ignored_patterns: tuple[str, ...]
    long_form_hosts: tuple[str, ...]

    @classmethod
    def from_settings(cls, source: Settings) -> "ExtractionRules":
        return cls(
            tracking_params=frozenset(source.TRACKING_PARAMS),
            ignored_patterns=tuple(p.lower() for p in source.IGNORED_LINK_PATTERNS if p),
            long_form_hosts=tuple(h.lower() for h in source.LONG_FORM_HOSTS if h),
        )


@lru_cache(maxsize=1)
def default_rules() -> ExtractionRules:
    return ExtractionRules.from_settings(settings)
