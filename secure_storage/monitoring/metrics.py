import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, Tuple

from ..interfaces import Outcome

logger = logging.getLogger(__name__)


@dataclass
class OperationMetrics:
    count: int = 0
    total_duration: float = 0.0
    outcomes: Dict[str, int] = field(default_factory=dict)

    @property
    def avg_duration(self) -> float:
        return self.total_duration / self.count if self.count > 0 else 0.0

    @property
    def failure_count(self) -> int:
        return sum(
            n for outcome, n in self.outcomes.items()
            if outcome not in (Outcome.OK.value, Outcome.ABSENT.value)
        )


class StoreMetrics:
    """Per-operation counters and rolling duration window for a guarded store."""

    def __init__(self, window_size: int = 3600, max_samples: int = 1000):
        self.window_size = window_size
        self.max_samples = max_samples
        self.operation_metrics: Dict[str, OperationMetrics] = {}
        self.operation_times: Dict[str, Deque[Tuple[float, float]]] = {}
        self.last_cleanup = time.time()

    def record(self, operation: str, outcome: Outcome, duration: float) -> None:
        """Record one completed operation."""
        if operation not in self.operation_metrics:
            self.operation_metrics[operation] = OperationMetrics()
            self.operation_times[operation] = deque(maxlen=self.max_samples)

        metrics = self.operation_metrics[operation]
        metrics.count += 1
        metrics.total_duration += duration
        metrics.outcomes[outcome.value] = metrics.outcomes.get(outcome.value, 0) + 1

        self.operation_times[operation].append((time.time(), duration))

    def get_metrics(self) -> Dict[str, Any]:
        """Get current metrics."""
        self._cleanup_old_metrics()

        return {
            operation: {
                'count': metrics.count,
                'avg_duration': metrics.avg_duration,
                'p95_duration': self._calculate_percentile(operation, 95),
                'failures': metrics.failure_count,
                'outcomes': dict(metrics.outcomes),
            }
            for operation, metrics in self.operation_metrics.items()
        }

    def reset(self) -> None:
        self.operation_metrics.clear()
        self.operation_times.clear()

    def _calculate_percentile(self, operation: str, percentile: float) -> float:
        """Calculate duration percentile for an operation."""
        times = sorted(t[1] for t in self.operation_times.get(operation, ()))
        if not times:
            return 0.0

        idx = min(int(len(times) * (percentile / 100)), len(times) - 1)
        return times[idx]

    def _cleanup_old_metrics(self, force: bool = False) -> None:
        """Remove duration samples outside the window."""
        current_time = time.time()
        if not force and current_time - self.last_cleanup < 60:  # Only cleanup every minute
            return

        cutoff = current_time - self.window_size
        for samples in self.operation_times.values():
            while samples and samples[0][0] < cutoff:
                samples.popleft()

        self.last_cleanup = current_time
        logger.debug(f"Pruned store metrics older than {self.window_size}s")
