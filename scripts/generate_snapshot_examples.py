from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/snapshots")
BASE_ARGS = ["--width", "320", "--height", "200"]


@dataclass
class Example:
    name: str
    args: list[str]
    output: Path

    def full_args(self) -> list[str]:
        return ["python", "explore.py", *self.args, "--snapshot", str(self.output)]


EXAMPLES: list[Example] = [
    Example(
        name="default-view",
        args=[*BASE_ARGS],
        output=EXAMPLES_ROOT / "default-view" / "mandelbrot.png",
    ),
    Example(
        name="scale",
        args=[*BASE_ARGS, "--scale", "1.0"],
        output=EXAMPLES_ROOT / "scale" / "full-resolution.png",
    ),
    Example(
        name="low-scale",
        args=[*BASE_ARGS, "--scale", "0.2"],
        output=EXAMPLES_ROOT / "low-scale" / "coarse.png",
    ),
    Example(
        name="resample",
        args=[*BASE_ARGS, "--scale", "0.2", "--resample", "bilinear"],
        output=EXAMPLES_ROOT / "resample" / "coarse-bilinear.png",
    ),
    Example(
        name="zoom",
        args=[*BASE_ARGS, "--x-center", "-0.7453", "--y-center", "0.1127", "--zoom", "60000"],
        output=EXAMPLES_ROOT / "zoom" / "seahorse-valley.png",
    ),
    Example(
        name="max-iterations",
        args=[*BASE_ARGS, "--x-center", "-0.7453", "--y-center", "0.1127", "--zoom", "60000",
              "--max-iterations", "1000"],
        output=EXAMPLES_ROOT / "max-iterations" / "deep-budget.png",
    ),
    Example(
        name="colormap",
        args=[*BASE_ARGS, "--colormap", "twilight_shifted"],
        output=EXAMPLES_ROOT / "colormap" / "twilight.png",
    ),
    Example(
        name="inside-color",
        args=[*BASE_ARGS, "--inside-color", "#1a2b3c"],
        output=EXAMPLES_ROOT / "inside-color" / "tinted.png",
    ),
    Example(
        name="format",
        args=[*BASE_ARGS, "--format", "jpg"],
        output=EXAMPLES_ROOT / "format" / "mandelbrot.jpg",
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def _prepare(example: Example) -> None:
    _ensure_clean([example.output.parent])
    example.output.parent.mkdir(parents=True, exist_ok=True)


def _verify(example: Example) -> None:
    if not example.output.is_file():
        raise RuntimeError(f"Expected file {example.output} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[snapshot-example] {example.name}")
        _prepare(example)
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll snapshot examples generated successfully.")


if __name__ == "__main__":
    main()
