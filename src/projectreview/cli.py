# src/projectreview/cli.py
import sys
import argparse
import dataclasses
import logging
import os
from pathlib import Path
from typing import List

from projectreview.config import (
    DEFAULT_ADMISSION_CONFIG,
    DEFAULT_MODEL,
    DEFAULT_PROJECT_NAME,
    ReviewConfig,
    load_api_key,
)
from projectreview.core.admission import admit
from projectreview.core.ignore import load_ignore_spec
from projectreview.core.prompt import build_prompt, payload_size
from projectreview.core.scanner import ProjectScanner
from projectreview.core.tree import generate_file_tree
from projectreview.errors import ReviewError
from projectreview.models import AdmissionResult
from projectreview.reviewer import Reviewer, ReviewSession
from projectreview.utils.tokenizer import Tokenizer


def create_arg_parser():
    parser = argparse.ArgumentParser(
        description="Send a project's reviewable source files to Gemini and print its code review."
    )
    parser.add_argument("root_dir", type=str, nargs="?", default=os.getcwd(), help="Project root directory")
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Write the review (or, with --dry-run, the prompt) to this file",
    )
    parser.add_argument("-m", "--model", type=str, default=DEFAULT_MODEL, help="Gemini model name")
    parser.add_argument("--dry-run", action="store_true", help="Build the prompt without calling the API")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log skipped files and request details")
    return parser


def get_default_prompt_name(root_dir: Path) -> str:
    folder_name = root_dir.name or "project"
    return f"{folder_name.replace(' ', '_')}_review_prompt.txt"


def output_ignore_patterns(root_dir: Path, output_file: Path) -> List[str]:
    """Anchored gitignore line for the output file, if it lives inside the project."""
    try:
        rel_path = output_file.resolve().relative_to(root_dir)
    except ValueError:
        return []
    return [f"/{rel_path.as_posix()}"]


def print_summary(result: AdmissionResult, project_name: str, pruned_dirs: int = 0):
    print(f"{len(result.accepted)} file(s) collected.")
    if pruned_dirs:
        print(f"{pruned_dirs} ignored director(ies) not scanned.")
    if result.truncated:
        print(
            f"Processing the first {result.total - result.truncated} files out of {result.total}. "
            f"{result.truncated} file(s) were not considered."
        )
    if result.skipped:
        print(f"{len(result.skipped)} file(s) skipped:")
        for reason, count in sorted(result.summary().items(), key=lambda item: item[0].value):
            print(f"  {reason.value:<34} {count}")

    if result.accepted:
        print("\n--- Files ---")
        print(generate_file_tree(result.accepted, project_name), end="")


def main():
    try:
        parser = create_arg_parser()
        args = parser.parse_args()

        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )

        root_dir = Path(args.root_dir).resolve()
        if not root_dir.is_dir():
            print(f"Error: Invalid directory '{root_dir}'", file=sys.stderr)
            sys.exit(1)

        project_name = root_dir.name or None

        # Credential first: nothing is scanned without it
        api_key = None
        if not args.dry_run:
            try:
                api_key = load_api_key()
            except ReviewError as e:
                print(f"Error: {e.message}", file=sys.stderr)
                sys.exit(1)

        print("--- projectreview ---")
        print(f"Scanning: {root_dir}")

        # Never feed our own output back into the review
        output_file = root_dir / (args.output or get_default_prompt_name(root_dir))
        admission_config = dataclasses.replace(
            DEFAULT_ADMISSION_CONFIG,
            extra_ignore=load_ignore_spec(root_dir, extra_patterns=output_ignore_patterns(root_dir, output_file)),
        )
        scanner = ProjectScanner(root_dir, admission_config)
        descriptors = list(scanner.scan())
        admission = admit(descriptors, admission_config)
        print_summary(admission, project_name or "project", scanner.pruned_dirs)

        if not admission.accepted:
            if admission.total:
                print("Error: No reviewable files found. Check file types or ignored patterns.", file=sys.stderr)
            else:
                print("Error: No files selected or folder is empty.", file=sys.stderr)
            sys.exit(1)

        prompt = build_prompt(admission.accepted, project_name or DEFAULT_PROJECT_NAME)
        print(f"\nPrompt size: {payload_size(prompt)} bytes | Est. tokens: {Tokenizer.count(prompt)}")

        if args.dry_run:
            output_file.write_text(prompt, encoding="utf-8")
            print(f"Prompt written to: {output_file}")
            return

        print(f"Reviewing project with {args.model}...")
        session = ReviewSession(Reviewer(ReviewConfig(api_key=api_key, model=args.model)))
        result = session.review(admission.accepted, project_name)

        if not result.ok:
            print(f"Error: {result.error.message}", file=sys.stderr)
            sys.exit(1)

        if args.output:
            output_file.write_text(result.text, encoding="utf-8")
            print(f"Review written to: {output_file}")
        else:
            print()
            print(result.text)

    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(1)

    except Exception as e:
        print(f"An unexpected error occurred: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
