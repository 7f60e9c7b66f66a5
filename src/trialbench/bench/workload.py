"""Seeded synthetic workloads.

A workload is a labeled sequence of symbols drawn uniformly from a fixed
alphabet.  Generation is deterministic for a given seed so that runs can
be reproduced across machines.

Fixture file format::

    >100_test_sequence
    MKTAYIAK...           (exactly ``size`` symbols)
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

AMINO_ACIDS = "ACDEFGHIKLMNPQRSTVWY*"
DEFAULT_SIZES: tuple[int, ...] = (10, 25, 50, 100, 200, 500, 1000)
DEFAULT_SEED = 42


@dataclass(frozen=True)
class Workload:
    """An immutable generated input."""

    id: str
    size: int
    payload: str

    @property
    def label(self) -> str:
        return f"{self.size}_test_sequence"

    @property
    def fixture_name(self) -> str:
        return f"test_{self.size}.faa"

    def to_fixture_text(self) -> str:
        """Render the workload as a single-record sequence file."""
        return f">{self.label}\n{self.payload}\n"


class WorkloadGenerator:
    """Produces workloads from a seeded random source.

    ``generate`` builds each workload from its own fresh stream, so the
    same ``(size, seed)`` always gives the same payload.
    ``generate_batch`` draws a list of workloads from one advancing
    stream, which is also reproducible for a given seed and size order.
    """

    def __init__(self, seed: int = DEFAULT_SEED, alphabet: str = AMINO_ACIDS) -> None:
        if not alphabet:
            raise ValueError("Alphabet must contain at least one symbol.")
        self.seed = seed
        self.alphabet = alphabet

    def generate(self, size: int, seed: int | None = None) -> Workload:
        """Generate one workload of *size* symbols."""
        rng = random.Random(self.seed if seed is None else seed)
        return self._draw(size, rng)

    def generate_batch(self, sizes: Iterable[int]) -> list[Workload]:
        """Generate one workload per size, in the given order."""
        rng = random.Random(self.seed)
        return [self._draw(size, rng) for size in sizes]

    def generate_int_pairs(
        self,
        count: int,
        low: int = 1,
        high: int = 1000,
        seed: int | None = None,
    ) -> list[tuple[int, int]]:
        """Generate *count* integer pairs drawn uniformly from [low, high]."""
        if count < 0:
            raise ValueError(f"count cannot be negative (got {count})")
        rng = random.Random(self.seed if seed is None else seed)
        return [(rng.randint(low, high), rng.randint(low, high)) for _ in range(count)]

    def _draw(self, size: int, rng: random.Random) -> Workload:
        if size < 0:
            raise ValueError(f"Workload size cannot be negative (got {size})")
        payload = "".join(rng.choice(self.alphabet) for _ in range(size))
        return Workload(id=f"test_{size}", size=size, payload=payload)


# ---------------------------------------------------------------------------
# Fixture files
# ---------------------------------------------------------------------------


def write_fixture(workload: Workload, directory: Path) -> Path:
    """Write *workload* to ``directory/test_{size}.faa`` and return the path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / workload.fixture_name
    path.write_text(workload.to_fixture_text())
    return path


def write_fixtures(workloads: Sequence[Workload], directory: Path) -> dict[str, Path]:
    """Write every workload and return a mapping of workload id to path."""
    return {w.id: write_fixture(w, directory) for w in workloads}
