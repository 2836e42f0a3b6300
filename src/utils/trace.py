"""Tracing module: logs sudoku solver steps and writes to CSV."""

import csv
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.utils.logging_utils import get_logger

logger = get_logger()


@dataclass
class TraceStep:
    """A single step in the solving process."""

    timestamp: float
    step_number: int
    action_type: str  # 'assign', 'guess', 'backtrack', 'solution_found'
    index: Optional[int] = None  # 1-based cell index
    value: Optional[int] = None
    candidates: Optional[int] = None  # candidate count of the cell before the step
    depth: Optional[int] = None  # number of open guesses
    reason: Optional[str] = None


class Tracer:
    """Records solver steps for logging and analysis."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.steps: List[TraceStep] = []
        self.start_time = datetime.now().timestamp()
        self.step_counter = 0

    def _get_timestamp(self) -> float:
        """Get elapsed time in seconds since tracer creation."""
        return datetime.now().timestamp() - self.start_time

    def _record(self, action_type: str, **fields: Any) -> None:
        self.step_counter += 1
        self.steps.append(TraceStep(
            timestamp=self._get_timestamp(),
            step_number=self.step_counter,
            action_type=action_type,
            **fields,
        ))

    def log_assign(self, index: int, value: int, candidates: int, depth: int, reason: str = ""):
        """Log a forced assignment (a bound value or a lone candidate)."""
        if not self.enabled:
            return
        self._record('assign', index=index, value=value, candidates=candidates,
                     depth=depth, reason=reason or None)

    def log_guess(self, index: int, value: int, candidates: int, depth: int):
        """Log a guessed value for a cell with several candidates."""
        if not self.enabled:
            return
        self._record('guess', index=index, value=value, candidates=candidates, depth=depth)

    def log_backtrack(self, index: int, depth: int, reason: str = "No valid values"):
        """Log a backtrack event."""
        if not self.enabled:
            return
        self._record('backtrack', index=index, depth=depth, reason=reason)

    def log_solution_found(self, depth: int, reason: str = ""):
        """Log when a solution is found."""
        if not self.enabled:
            return
        self._record('solution_found', depth=depth, reason=reason or None)

    def to_csv(self, filepath: Path) -> None:
        """Write trace to CSV file."""
        if not self.steps:
            logger.info("No trace steps to write")
            return

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        fieldnames = [
            'timestamp', 'step_number', 'action_type', 'index', 'value',
            'candidates', 'depth', 'reason',
        ]
        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for step in self.steps:
                writer.writerow(asdict(step))

        logger.info("Trace written to %s (%d steps)", filepath, len(self.steps))

    def summary(self) -> Dict[str, Any]:
        """Get a summary of the trace."""
        action_counts: Dict[str, int] = {}
        for step in self.steps:
            action_counts[step.action_type] = action_counts.get(step.action_type, 0) + 1

        return {
            'total_steps': len(self.steps),
            'elapsed_time_seconds': self._get_timestamp(),
            'action_counts': action_counts,
            'num_assignments': action_counts.get('assign', 0),
            'num_guesses': action_counts.get('guess', 0),
            'num_backtracks': action_counts.get('backtrack', 0),
        }


# Global tracer instance
_global_tracer: Optional[Tracer] = None


def get_tracer() -> Tracer:
    """Get or create the global tracer.

    A new global tracer records only when SUDOKU_TRACE is set.
    """
    from src.sudoku import config

    global _global_tracer
    if _global_tracer is None:
        _global_tracer = Tracer(enabled=config.env_flag(config.TRACE_ENV, default=False))
    return _global_tracer


def reset_tracer() -> None:
    """Reset the global tracer."""
    global _global_tracer
    _global_tracer = None


def enable_tracing(enabled: bool = True) -> None:
    """Enable or disable tracing."""
    get_tracer().enabled = enabled
