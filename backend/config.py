import os
from dataclasses import dataclass
from typing import Tuple

DEFAULT_MILESTONES = "20,40,60,80,100"
# Progress recorded by the launcher when a job is dispatched.
INITIAL_PROGRESS = 10


def _parse_milestones(raw: str) -> Tuple[int, ...]:
    try:
        milestones = tuple(int(part) for part in raw.split(",") if part.strip())
    except ValueError as e:
        raise ValueError(f"PIPELINE_MILESTONES must be a comma-separated list of integers: {raw!r}") from e
    validate_milestones(milestones)
    return milestones


def validate_milestones(milestones: Tuple[int, ...]) -> None:
    if not milestones:
        raise ValueError("At least one milestone is required")
    previous = INITIAL_PROGRESS
    for value in milestones:
        if value <= previous or value > 100:
            raise ValueError(
                f"Milestones must be strictly increasing within ({INITIAL_PROGRESS}, 100]: {milestones}"
            )
        previous = value


@dataclass(frozen=True)
class PipelineSettings:
    milestones: Tuple[int, ...] = (20, 40, 60, 80, 100)
    milestone_interval: float = 1.0  # seconds paused before each milestone
    max_workers: int = 4
    stall_timeout: float = 300.0  # 0 disables stall reconciliation
    stall_sweep_interval: float = 30.0

    def __post_init__(self) -> None:
        validate_milestones(self.milestones)
        if self.milestone_interval < 0:
            raise ValueError("milestone_interval must be >= 0")
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")

    @classmethod
    def from_env(cls) -> "PipelineSettings":
        return cls(
            milestones=_parse_milestones(os.environ.get("PIPELINE_MILESTONES", DEFAULT_MILESTONES)),
            milestone_interval=float(os.environ.get("PIPELINE_MILESTONE_INTERVAL", "1.0")),
            max_workers=int(os.environ.get("PIPELINE_MAX_WORKERS", "4")),
            stall_timeout=float(os.environ.get("PIPELINE_STALL_TIMEOUT", "300")),
            stall_sweep_interval=float(os.environ.get("PIPELINE_STALL_SWEEP_INTERVAL", "30")),
        )
