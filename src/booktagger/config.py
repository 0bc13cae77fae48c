"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_TOP_K = 50
DEFAULT_MIN_YEAR = 1450
DEFAULT_MAX_YEAR = 2099

ID_STRATEGIES = ("random", "content")


@dataclass(slots=True)
class AppConfig:
    output_path: Path = Path("documents.json")
    exclusions_path: Path | None = None
    top_k: int = DEFAULT_TOP_K
    min_token_length: int = 3
    min_year: int = DEFAULT_MIN_YEAR
    max_year: int = DEFAULT_MAX_YEAR
    workers: int = 4
    id_strategy: str = "random"
    skip_empty: bool = False
    strict: bool = False

    def __post_init__(self) -> None:
        if self.top_k < 0:
            raise ValueError(f"top_k must be >= 0, got {self.top_k}")
        if self.min_token_length < 1:
            raise ValueError(f"min_token_length must be >= 1, got {self.min_token_length}")
        if self.min_year > self.max_year:
            raise ValueError(f"min_year {self.min_year} is after max_year {self.max_year}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.id_strategy not in ID_STRATEGIES:
            raise ValueError(f"Unknown id strategy: {self.id_strategy}")

    def resolve_output_path(self, base_dir: Path | None = None) -> Path:
        if Path(self.output_path).is_absolute() or base_dir is None:
            return Path(self.output_path)
        return base_dir / self.output_path
