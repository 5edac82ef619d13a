# src/projectreview/core/tree.py
from typing import Dict, List, Sequence, Union

from projectreview.models import AcceptedFile

# Directory nodes are dicts, file leaves hold the file's line count
Node = Dict[str, Union["Node", int]]


def count_lines(content: str) -> int:
    return len(content.splitlines())


def _lines_under(node: Node) -> int:
    return sum(child if isinstance(child, int) else _lines_under(child) for child in node.values())


def generate_file_tree(files: Sequence[AcceptedFile], root_name: str) -> str:
    """
    Renders the files that go into the prompt as a tree, annotated with
    line counts so the heaviest parts of the review are visible at a glance:

        demo/ (12 lines)
        ├── README (1 line)
        └── src/ (11 lines)
            └── main.py (11 lines)
    """
    root: Node = {}
    for f in files:
        *dirs, name = f.path.split("/")
        node = root
        for d in dirs:
            node = node.setdefault(d, {})
        node[name] = count_lines(f.content)

    lines: List[str] = [f"{root_name}/ ({_plural(_lines_under(root))})"]

    def _render(node: Node, prefix: str):
        # Directories first, then files, each alphabetically
        entries = sorted(node.items(), key=lambda item: (isinstance(item[1], int), item[0]))
        for i, (name, child) in enumerate(entries):
            is_last = i == len(entries) - 1
            connector = "└── " if is_last else "├── "
            if isinstance(child, int):
                lines.append(f"{prefix}{connector}{name} ({_plural(child)})")
            else:
                lines.append(f"{prefix}{connector}{name}/ ({_plural(_lines_under(child))})")
                _render(child, prefix + ("    " if is_last else "│   "))

    _render(root, "")
    return "\n".join(lines) + "\n"


def _plural(count: int) -> str:
    return f"{count} line" if count == 1 else f"{count} lines"
