# tests/test_prompt.py
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from projectreview.core.prompt import SYSTEM_INSTRUCTION, build_prompt, payload_size, split_prompt
from projectreview.core.tree import generate_file_tree
from projectreview.models import AcceptedFile


@pytest.fixture
def files():
    return [
        AcceptedFile("src/main.py", "def main():\n    print('hi')\n"),
        AcceptedFile("README.md", "# Demo\n\n```bash\nmake\n```\n"),
        AcceptedFile("empty.txt", ""),
    ]


def test_build_prompt_layout(files):
    prompt = build_prompt(files[:1], "demo")

    assert prompt == (
        "Project Name: demo\n\n"
        "--- File Path: src/main.py ---\n"
        "```\n"
        "def main():\n    print('hi')\n"
        "\n```\n"
        "--- End of File: src/main.py ---\n\n"
    )


def test_split_prompt_recovers_files_in_order(files):
    name, recovered = split_prompt(build_prompt(files, "demo"))

    assert name == "demo"
    assert recovered == files


def test_split_prompt_rejects_garbage():
    with pytest.raises(ValueError):
        split_prompt("not a prompt")
    with pytest.raises(ValueError):
        split_prompt("Project Name: x\n\n--- File Path: a.py ---\n```\nunterminated")


def test_payload_size_counts_utf8_bytes():
    assert payload_size("abc") == 3
    assert payload_size("é") == 2
    assert payload_size("日本") == 6


def test_system_instruction_covers_rubric():
    for topic in ("Architecture", "Consistency", "Correctness", "Security", "Performance",
                  "UI/UX", "Suggestions", "Dependencies", "Documentation"):
        assert topic in SYSTEM_INSTRUCTION


def test_file_tree_shows_line_counts():
    tree = generate_file_tree([
        AcceptedFile("README", "Demo\n"),
        AcceptedFile("src/main.py", "a\nb\nc\n"),
        AcceptedFile("src/utils/helper.py", "x\n"),
    ], "demo")

    assert tree == (
        "demo/ (5 lines)\n"
        "├── src/ (4 lines)\n"
        "│   ├── utils/ (1 line)\n"
        "│   │   └── helper.py (1 line)\n"
        "│   └── main.py (3 lines)\n"
        "└── README (1 line)\n"
    )


def test_split_prompt_stops_at_first_matching_close_marker():
    # A file that quotes its own closing marker cannot be recovered
    tricky = AcceptedFile("a.md", "before\n```\n--- End of File: a.md ---\n\nafter")
    with pytest.raises(ValueError):
        split_prompt(build_prompt([tricky], "demo"))
