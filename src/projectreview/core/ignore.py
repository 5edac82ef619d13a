# src/projectreview/core/ignore.py
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

import pathspec

from projectreview.config import REVIEWIGNORE_FILENAME

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryPattern:
    """`/name/`: matches when the slash-wrapped path contains the pattern."""
    pattern: str


@dataclass(frozen=True)
class ExtensionPattern:
    """`*.ext`: case-insensitive suffix match on `.ext`."""
    pattern: str

    @property
    def suffix(self) -> str:
        return self.pattern[1:].lower()


@dataclass(frozen=True)
class SuffixPattern:
    """Anything else: case-insensitive literal suffix (`.DS_Store`, `Thumbs.db`)."""
    pattern: str


IgnorePattern = Union[DirectoryPattern, ExtensionPattern, SuffixPattern]


def parse_pattern(raw: str) -> IgnorePattern:
    if len(raw) > 1 and raw.startswith("/") and raw.endswith("/"):
        return DirectoryPattern(raw)
    if raw.startswith("*."):
        return ExtensionPattern(raw)
    return SuffixPattern(raw)


def compile_patterns(raw_patterns: Iterable[str]) -> Tuple[IgnorePattern, ...]:
    return tuple(parse_pattern(p) for p in raw_patterns)


def match_pattern(path: str, pattern: IgnorePattern) -> bool:
    """Tests one slash-normalized path against one pattern."""
    if isinstance(pattern, DirectoryPattern):
        return pattern.pattern in f"/{path}/"
    if isinstance(pattern, ExtensionPattern):
        return path.lower().endswith(pattern.suffix)
    if isinstance(pattern, SuffixPattern):
        return path.lower().endswith(pattern.pattern.lower())
    raise TypeError(f"Unknown ignore pattern type: {type(pattern).__name__}")


def first_match(path: str, patterns: Iterable[IgnorePattern]) -> Optional[IgnorePattern]:
    for pattern in patterns:
        if match_pattern(path, pattern):
            return pattern
    return None


def load_ignore_spec(
    root_dir: Path,
    extra_patterns: Optional[List[str]] = None,
    filename: str = REVIEWIGNORE_FILENAME,
) -> Optional[pathspec.PathSpec]:
    """
    Loads user rules (gitignore syntax) from the project's .reviewignore,
    plus any extra patterns (like the output file). Returns None when there
    are no rules at all.
    """
    lines: List[str] = []
    ignore_file = root_dir / filename
    if ignore_file.is_file():
        with open(ignore_file, "r", encoding="utf-8") as f:
            lines = f.read().splitlines()

    if extra_patterns:
        lines.extend(extra_patterns)
    if not lines:
        return None

    spec = pathspec.PathSpec.from_lines("gitwildmatch", lines)
    logger.debug("Loaded %d rule(s) from %s", len(spec.patterns), ignore_file)
    return spec
