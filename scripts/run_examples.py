#!/usr/bin/env python3
"""Run the example scripts and report results.

Examples are discovered in ``examples/`` and run in name order, each in its
own interpreter. Pass substrings to run a subset, e.g.
``run_examples.py retry cancel``. Stops on the first failure.
"""

import subprocess
import sys
from pathlib import Path

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / "examples"
TIMEOUT_SECONDS = 60


def find_examples(examples_dir: Path, filters: list[str]) -> list[Path]:
    """Return example scripts matching any of ``filters`` (all when empty)."""
    examples = sorted(examples_dir.glob("[0-9]*.py"))
    if not filters:
        return examples
    return [path for path in examples if any(f in path.stem for f in filters)]


def run_example(example: Path) -> bool:
    """Run one example, printing its output. Returns True on success."""
    print(f"Running: {example.name}...", flush=True)
    try:
        result = subprocess.run(
            [sys.executable, str(example)],
            capture_output=True,
            text=True,
            timeout=TIMEOUT_SECONDS,
        )
    except subprocess.TimeoutExpired:
        print(f"✗ {example.name} TIMED OUT (>{TIMEOUT_SECONDS}s)")
        return False

    if result.stdout:
        print(result.stdout)
    if result.returncode != 0:
        print(f"✗ {example.name} FAILED (exit code {result.returncode})")
        if result.stderr:
            print(result.stderr)
        return False

    print(f"{example.name} passed\n")
    return True


def main(argv: list[str]) -> int:
    examples = find_examples(EXAMPLES_DIR, argv)
    if not examples:
        print(f"No examples found in {EXAMPLES_DIR}")
        return 0

    print(f"Found {len(examples)} example(s) to run\n" + "=" * 60)
    for index, example in enumerate(examples):
        if not run_example(example):
            print("=" * 60)
            print(f"\nFAILED after {index}/{len(examples)} examples")
            return 1

    print("=" * 60)
    print(f"\nAll {len(examples)} example(s) passed")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
