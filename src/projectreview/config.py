# src/projectreview/config.py
import os
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

import pathspec
from dotenv import load_dotenv

from projectreview.errors import ConfigurationMissingError

# Extensions (lower-case, with leading dot) and exact bare filenames worth reviewing.
DEFAULT_ALLOWED_NAMES = frozenset([
    # JavaScript / TypeScript
    ".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs",
    "package.json", "tsconfig.json", "jsconfig.json",
    ".eslintrc.json", ".prettierrc.json", ".babelrc.json",
    # HTML / CSS
    ".html", ".htm", ".css", ".scss", ".sass", ".less", ".styl",
    # Python
    ".py", "requirements.txt", "Pipfile", "pyproject.toml", ".python-version",
    # JVM
    ".java", ".kt", ".kts", ".scala", ".groovy",
    "pom.xml", "build.gradle", "build.gradle.kts", "settings.gradle",
    # Ruby
    ".rb", "Gemfile", "Rakefile", ".ruby-version",
    # PHP
    ".php", "composer.json",
    # Go
    ".go", "go.mod", "go.sum",
    # Rust
    ".rs", "Cargo.toml", "Cargo.lock",
    # C / C++
    ".c", ".cpp", ".h", ".hpp", "Makefile", "CMakeLists.txt",
    # Swift / Objective-C
    ".swift", ".m",
    # Shell / Docker / config
    ".sh", ".bash", ".zsh", "Dockerfile", "docker-compose.yml", ".yml", ".yaml", ".json",
    ".xml", ".ini", ".toml", ".conf", ".cfg", ".properties",
    # Docs
    ".md", ".txt", ".rst",
    ".sql",
    ".wat",
    ".vue", ".svelte",
    ".gitignore", ".gitattributes", ".editorconfig", "LICENSE", "README",
])

# Three pattern kinds, see projectreview.core.ignore:
#   "/name/"  directory anywhere in the path
#   "*.ext"   case-insensitive extension suffix
#   other     case-insensitive literal suffix
DEFAULT_IGNORE_PATTERNS = (
    "/.git/",
    "/node_modules/",
    # .env directories may hold secrets
    "/venv/", "/.venv/", "/env/", "/.env/",
    "/__pycache__/", "/.pytest_cache/", "/.mypy_cache/",
    "/dist/", "/build/", "/out/", "/target/", "/bin/",
    "/.vscode/", "/.idea/", "/.project/", "/.classpath/", "/.settings/",
    ".DS_Store", "Thumbs.db",
    "*.log",
    "*.zip", "*.tar", "*.gz", "*.rar", "*.7z",
    "*.exe", "*.dll", "*.so", "*.o", "*.a", "*.lib", "*.class", "*.pyc", "*.pyo", "*.wasm",
    "*.png", "*.jpg", "*.jpeg", "*.gif", "*.bmp", "*.tiff", "*.ico", "*.webp",
    "*.mp3", "*.wav", ".ogg", "*.mp4", "*.mov", "*.avi", "*.webm", "*.flv",
    "*.pdf", "*.doc", "*.docx", "*.ppt", "*.pptx", "*.xls", "*.xlsx",
    "*.dmg", "*.iso", "*.img",
    "*.woff", "*.woff2", "*.ttf", "*.otf", "*.eot",
    "*.sqlite", "*.db", "*.mdb",
    "*.csv",
    "*.tmp", "*.temp", "*.swp", "*.swo",
)

MAX_FILE_SIZE_BYTES = 2 * 1024 * 1024
MAX_TOTAL_FILES = 500

# ~1M token budget at roughly 4 characters per token, with margin.
MAX_PAYLOAD_BYTES = 3_800_000

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_PROJECT_NAME = "Unnamed Project"

REVIEWIGNORE_FILENAME = ".reviewignore"
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")


@dataclass(frozen=True)
class AdmissionConfig:
    """Fixed rules for deciding which files go into a review."""
    allowed_names: FrozenSet[str] = DEFAULT_ALLOWED_NAMES
    ignore_patterns: Tuple[str, ...] = DEFAULT_IGNORE_PATTERNS
    max_file_size: int = MAX_FILE_SIZE_BYTES
    max_total_files: int = MAX_TOTAL_FILES
    extra_ignore: Optional[pathspec.PathSpec] = field(default=None, compare=False)


@dataclass(frozen=True)
class ReviewConfig:
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    max_payload_bytes: int = MAX_PAYLOAD_BYTES


DEFAULT_ADMISSION_CONFIG = AdmissionConfig()


def load_api_key() -> str:
    """Reads the Gemini key from the environment (or a .env file)."""
    load_dotenv()
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    raise ConfigurationMissingError()
