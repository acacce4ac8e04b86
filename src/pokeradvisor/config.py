"""Application configuration for pokeradvisor."""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Self

from .calculator import DEFAULT_SIMULATIONS
from .policy import PolicyConfig


@dataclass
class SimulationConfig:
    """Configuration for the Monte Carlo equity oracle."""

    trials: int = DEFAULT_SIMULATIONS
    seed: int | None = None


@dataclass
class PolicySettings:
    """Default play-style, turned into a PolicyConfig per session or request."""

    aggressiveness: float = 1.0
    bluffing_enabled: bool = True
    bluff_frequency: float = 0.5

    def to_policy(self) -> PolicyConfig:
        return PolicyConfig(
            aggressiveness=self.aggressiveness,
            bluffing_enabled=self.bluffing_enabled,
            bluff_frequency=self.bluff_frequency,
        )


@dataclass
class HistoryConfig:
    """Where the audit log lives."""

    path: Path = Path("history.json")


@dataclass
class Config:
    """Application configuration."""

    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    policy: PolicySettings = field(default_factory=PolicySettings)
    history: HistoryConfig = field(default_factory=HistoryConfig)

    @classmethod
    def load(cls) -> Self:
        """Load config from file, falling back to defaults."""
        config_paths = [
            Path.cwd() / "pokeradvisor.toml",
            Path.cwd() / ".pokeradvisor.toml",
            Path.home() / ".config" / "pokeradvisor" / "config.toml",
            Path.home() / ".pokeradvisor.toml",
        ]

        for path in config_paths:
            if path.exists():
                return cls.from_file(path)

        return cls()

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Load config from a TOML file."""
        with open(path, "rb") as f:
            data = tomllib.load(f)

        sim_data = data.get("simulation", {})
        simulation = SimulationConfig(
            trials=sim_data.get("trials", DEFAULT_SIMULATIONS),
            seed=sim_data.get("seed"),
        )

        policy_data = data.get("policy", {})
        policy = PolicySettings(
            aggressiveness=policy_data.get("aggressiveness", 1.0),
            bluffing_enabled=policy_data.get("bluffing_enabled", True),
            bluff_frequency=policy_data.get("bluff_frequency", 0.5),
        )
        # Fail on load rather than on the first decision.
        policy.to_policy()

        history_data = data.get("history", {})
        history = HistoryConfig(path=Path(history_data.get("path", "history.json")))

        return cls(simulation=simulation, policy=policy, history=history)


# Global config instance (loaded lazily)
_config: Config | None = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = Config.load()
    return _config
