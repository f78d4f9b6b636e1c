from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--size", "160"]


@dataclass
class Example:
    name: str
    args: list[str]
    expected: Path

    def full_args(self) -> list[str]:
        return ["python", "render.py", *self.args, "--output", str(self.expected)]


def _example(name: str, filename: str, *args: str, base: bool = True) -> Example:
    flags = [*BASE_ARGS, *args] if base else list(args)
    return Example(name=name, args=flags, expected=EXAMPLES_ROOT / name / filename)


EXAMPLES: list[Example] = [
    _example("preset", "classic.png", "--preset", "classic"),
    _example("zoom", "zoomed.png", "--zoom", "4"),
    _example("center-x", "shifted-real.png", "--center-x", "-1.5"),
    _example("center-y", "shifted-imaginary.png", "--center-y", "0.8"),
    _example("span-x", "narrow.png", "--span-x", "1.0"),
    _example("span-y", "short.png", "--span-y", "1.0"),
    _example("bounds", "fixed-window.png", "--xmin", "-0.8", "--xmax", "-0.7", "--ymin", "0.05", "--ymax", "0.15"),
    _example("threshold", "large-radius.png", "--threshold", "50"),
    _example("max-iterations", "high-iterations.png", "--max-iterations", "200"),
    _example("size", "small.png", "--size", "64", base=False),
    _example("channels", "grayscale.png", "--channels", "gray"),
    _example("crosshairs", "crosshairs.png", "--crosshairs"),
    _example("output", "custom-name.png"),
    _example("format", "custom.webp", "--format", "webp"),
    _example("workers", "single-thread.png", "--workers", "1"),
    _example("unparseable", "fallback.png", "--zoom", "not-a-number"),
    _example("verbose", "diagnostic.png", "--verbose"),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def _prepare(example: Example) -> None:
    _ensure_clean([example.expected.parent])
    example.expected.parent.mkdir(parents=True, exist_ok=True)


def _verify(example: Example) -> None:
    if not example.expected.is_file():
        raise RuntimeError(f"Expected file {example.expected} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _prepare(example)
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
