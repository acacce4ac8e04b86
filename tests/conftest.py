"""Shared test doubles."""

import pytest


class FixedRandom:
    """RandomSource that always returns the same draw and counts calls."""

    def __init__(self, value: float) -> None:
        self.value = value
        self.calls = 0

    def next(self) -> float:
        self.calls += 1
        return self.value


class StubOracle:
    """Equity oracle returning a fixed probability and recording its inputs."""

    def __init__(self, p: float = 0.5) -> None:
        self.p = p
        self.calls: list[tuple[tuple[str, ...], tuple[str, ...], int]] = []

    def __call__(self, hand, community, num_players) -> float:
        self.calls.append(
            (tuple(c.code for c in hand), tuple(c.code for c in community), num_players)
        )
        return self.p


@pytest.fixture
def no_bluff_rng() -> FixedRandom:
    return FixedRandom(0.99)


@pytest.fixture
def oracle() -> StubOracle:
    return StubOracle(0.5)
