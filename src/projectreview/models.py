# src/projectreview/models.py
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from projectreview.config import DEFAULT_PROJECT_NAME
from projectreview.errors import ReviewError


def normalize_path(path: str) -> str:
    return path.replace("\\", "/")


@dataclass(frozen=True)
class FileDescriptor:
    """A candidate file: where it is, how big it is, and how to read it."""
    path: str
    size: int
    reader: Callable[[], bytes] = field(repr=False, compare=False)

    def __post_init__(self):
        if self.size < 0:
            raise ValueError(f"File size must be non-negative: {self.path} ({self.size})")
        object.__setattr__(self, "path", normalize_path(self.path))

    @classmethod
    def from_bytes(cls, path: str, data: bytes, size: Optional[int] = None) -> "FileDescriptor":
        return cls(path=path, size=len(data) if size is None else size, reader=lambda: data)

    def read(self) -> bytes:
        return self.reader()


@dataclass(frozen=True)
class AcceptedFile:
    path: str
    content: str


class SkipReason(str, Enum):
    SIZE_EXCEEDED = "size-exceeded"
    IGNORED_PATTERN = "ignored-pattern"
    UNREADABLE_AS_TEXT = "unreadable-as-text"
    EXTENSION_NOT_ALLOWED = "extension-not-allowed"
    EXTENSIONLESS_NOT_ALLOWLISTED = "no-extension-and-not-allowlisted"


@dataclass(frozen=True)
class SkipRecord:
    path: str
    reason: SkipReason
    detail: str = ""


@dataclass
class AdmissionResult:
    accepted: List[AcceptedFile]
    skipped: List[SkipRecord]
    total: int = 0
    truncated: int = 0

    def summary(self) -> Dict[SkipReason, int]:
        """Number of skipped files per reason."""
        return dict(Counter(record.reason for record in self.skipped))


@dataclass(frozen=True)
class ReviewRequest:
    files: Sequence[AcceptedFile]
    project_name: str = DEFAULT_PROJECT_NAME

    def __post_init__(self):
        if not self.project_name:
            object.__setattr__(self, "project_name", DEFAULT_PROJECT_NAME)
        object.__setattr__(self, "files", tuple(self.files))


@dataclass(frozen=True)
class ReviewResult:
    text: Optional[str] = None
    error: Optional[ReviewError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, text: str) -> "ReviewResult":
        return cls(text=text)

    @classmethod
    def failure(cls, error: ReviewError) -> "ReviewResult":
        return cls(error=error)
