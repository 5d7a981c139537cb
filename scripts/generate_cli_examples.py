from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--size", "160x120"]


@dataclass
class Expected:
    path: Path


@dataclass
class Example:
    name: str
    output: Path
    args: list[str]
    clean: list[Path] | None = None

    def full_args(self) -> list[str]:
        return ["python", "mandel.py", str(self.output), *BASE_ARGS, *self.args]

    @property
    def expected(self) -> list[Expected]:
        return [Expected(self.output)]


def _example(name: str, filename: str, *args: str) -> Example:
    return Example(
        name=name,
        output=EXAMPLES_ROOT / name / filename,
        args=list(args),
        clean=[EXAMPLES_ROOT / name],
    )


EXAMPLES: list[Example] = [
    _example("size", "wide.png", "--size", "240x120"),
    _example("upper-left", "seahorse.png", "--upper-left=-0.80,0.20", "--lower-right=-0.70,0.12"),
    _example("lower-right", "full-set.png", "--upper-left=-2.0,1.0", "--lower-right=1.0,-1.0"),
    _example("max-iterations", "high-iterations.png", "--max-iterations", "1000"),
    _example("bound-radius", "large-radius.png", "--bound-radius", "8"),
    _example("color-rainbow", "rainbow.png", "--color", "rainbow"),
    _example("color-colormap", "inferno.png", "--color", "colormap", "--colormap", "inferno"),
    _example("invert", "inverted.png", "--color", "colormap", "--invert"),
    _example("inside-color", "custom-interior.png", "--color", "colormap", "--inside-color", "#0a3ba0"),
    _example("execution", "single-thread.png", "--execution", "single"),
    _example("workers", "three-bands.png", "--workers", "3"),
    _example("backend", "tensor.png", "--backend", "tensor"),
    _example("format", "custom.webp", "--format", "webp"),
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
    clean = example.clean or []
    _ensure_clean(clean)
    for expected in example.expected:
        expected.path.parent.mkdir(parents=True, exist_ok=True)


def _verify(example: Example) -> None:
    for expected in example.expected:
        if not expected.path.is_file():
            raise RuntimeError(f"Expected file {expected.path} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _prepare(example)
        completed = subprocess.run(example.full_args(), check=True)
        if completed.returncode != 0:
            raise RuntimeError(f"Example {example.name} failed with {completed.returncode}")
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
