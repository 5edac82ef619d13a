# src/projectreview/core/admission.py
import logging
from typing import List, Optional, Sequence, Tuple, Union

from projectreview.config import DEFAULT_ADMISSION_CONFIG, AdmissionConfig
from projectreview.core.ignore import compile_patterns, first_match
from projectreview.models import (
    AcceptedFile,
    AdmissionResult,
    FileDescriptor,
    SkipReason,
    SkipRecord,
)

logger = logging.getLogger(__name__)

BINARY_SNIFF_BYTES = 1024


def split_name(path: str) -> Tuple[str, str]:
    """Returns (bare filename, lower-cased extension with dot or '')."""
    name = path.rsplit("/", 1)[-1]
    dot = name.rfind(".")
    extension = name[dot:].lower() if dot != -1 else ""
    return name, extension


def decode_text(data: bytes) -> Optional[str]:
    """UTF-8 text, or None if the bytes look binary or do not decode."""
    if b"\0" in data[:BINARY_SNIFF_BYTES]:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


class AdmissionPipeline:
    def __init__(self, config: AdmissionConfig = DEFAULT_ADMISSION_CONFIG):
        self.config = config
        self.patterns = compile_patterns(config.ignore_patterns)

    def check(self, descriptor: FileDescriptor) -> Optional[SkipRecord]:
        """Size, ignore and allow-list stages. None means the file may be read."""
        path = descriptor.path
        config = self.config

        if descriptor.size > config.max_file_size:
            return SkipRecord(
                path,
                SkipReason.SIZE_EXCEEDED,
                f"File size {descriptor.size} bytes > {config.max_file_size} bytes limit",
            )

        pattern = first_match(path, self.patterns)
        if pattern is not None:
            return SkipRecord(path, SkipReason.IGNORED_PATTERN, f"Matches ignore pattern: {pattern.pattern}")

        if config.extra_ignore is not None and config.extra_ignore.match_file(path):
            return SkipRecord(path, SkipReason.IGNORED_PATTERN, "Matches project ignore rules")

        name, extension = split_name(path)
        if name in config.allowed_names or extension in config.allowed_names:
            return None
        if not extension:
            return SkipRecord(
                path,
                SkipReason.EXTENSIONLESS_NOT_ALLOWLISTED,
                f"No extension and '{name}' not in allowed filenames list",
            )
        return SkipRecord(
            path,
            SkipReason.EXTENSION_NOT_ALLOWED,
            f"Extension '{extension}' not in allowed list",
        )

    def read(self, descriptor: FileDescriptor) -> Union[AcceptedFile, SkipRecord]:
        try:
            data = descriptor.read()
        except OSError as e:
            return SkipRecord(descriptor.path, SkipReason.UNREADABLE_AS_TEXT, f"Read error: {e}")

        content = decode_text(data)
        if content is None:
            return SkipRecord(descriptor.path, SkipReason.UNREADABLE_AS_TEXT, "Could not read as text (binary?)")
        return AcceptedFile(path=descriptor.path, content=content)

    def run(self, descriptors: Sequence[FileDescriptor]) -> AdmissionResult:
        if descriptors is None:
            raise TypeError("admit() requires a sequence of file descriptors, got None")

        descriptors = list(descriptors)
        total = len(descriptors)
        limit = self.config.max_total_files
        truncated = max(0, total - limit)
        if truncated:
            logger.warning("Too many files (%d). Processing the first %d.", total, limit)

        accepted: List[AcceptedFile] = []
        skipped: List[SkipRecord] = []

        for descriptor in descriptors[:limit]:
            outcome = self.check(descriptor)
            if outcome is None:
                outcome = self.read(descriptor)

            if isinstance(outcome, SkipRecord):
                logger.debug("Skipping %s (%s)", outcome.path, outcome.detail)
                skipped.append(outcome)
            else:
                accepted.append(outcome)

        return AdmissionResult(accepted=accepted, skipped=skipped, total=total, truncated=truncated)


def admit(
    descriptors: Sequence[FileDescriptor],
    config: AdmissionConfig = DEFAULT_ADMISSION_CONFIG,
) -> AdmissionResult:
    return AdmissionPipeline(config).run(descriptors)
