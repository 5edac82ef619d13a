# src/projectreview/core/scanner.py
import os
from pathlib import Path
from typing import Iterator

from projectreview.config import DEFAULT_ADMISSION_CONFIG, AdmissionConfig
from projectreview.core.ignore import DirectoryPattern, compile_patterns, match_pattern
from projectreview.models import FileDescriptor


class ProjectScanner:
    def __init__(self, root_dir: Path, config: AdmissionConfig = DEFAULT_ADMISSION_CONFIG):
        self.root_dir = root_dir
        self.config = config
        self.directory_patterns = [
            p for p in compile_patterns(config.ignore_patterns) if isinstance(p, DirectoryPattern)
        ]
        self.pruned_dirs = 0

    def is_pruned(self, rel_dir: str) -> bool:
        """True if a directory is excluded by a directory pattern or by the project's ignore rules."""
        if any(match_pattern(rel_dir, p) for p in self.directory_patterns):
            return True
        extra = self.config.extra_ignore
        return extra is not None and extra.match_file(f"{rel_dir}/")

    def scan(self) -> Iterator[FileDescriptor]:
        """
        Walks the directory tree in sorted order and yields a descriptor per file.
        Ignored directories (.git, node_modules, ...) are pruned so they never
        count against the admission file cap; every other file reaches the
        admission ledger. Contents are read lazily through the descriptor's reader.
        """
        self.pruned_dirs = 0
        for root, dirs, files in os.walk(self.root_dir):
            root_path = Path(root)

            # os.walk only descends into what is left in dirs
            for d in list(dirs):
                rel_dir = (root_path / d).relative_to(self.root_dir).as_posix()
                if self.is_pruned(rel_dir):
                    dirs.remove(d)
                    self.pruned_dirs += 1
            dirs.sort()

            for f in sorted(files):
                file_abs_path = root_path / f
                if not file_abs_path.is_file():
                    continue
                try:
                    size = file_abs_path.stat().st_size
                except OSError:
                    size = 0

                rel_path = file_abs_path.relative_to(self.root_dir).as_posix()
                yield FileDescriptor(path=rel_path, size=size, reader=file_abs_path.read_bytes)
