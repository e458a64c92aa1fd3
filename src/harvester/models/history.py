"""Per-step performance records and the bounded history that owns them."""

from dataclasses import dataclass
from typing import Dict, Any, Iterator, List, Optional, Tuple, TYPE_CHECKING
import math

from ..environment import EnvironmentSample
from .storage import StorageSnapshot

if TYPE_CHECKING:
    from ..economics import EconomicSnapshot


@dataclass(frozen=True)
class PerformanceRecord:
    """Everything observed during one simulated step."""
    time_index: int
    environment: EnvironmentSample
    power: Dict[str, float]  # W per modality, after weighting
    total_power: float  # W harvested
    maintenance_power: float  # W
    net_power: float  # W
    storage: StorageSnapshot
    economics: Optional['EconomicSnapshot'] = None
    time_step: float = 1.0  # hours

    @property
    def positive_energy(self) -> float:
        """Surplus energy in Wh contributed by this step."""
        return max(0.0, self.net_power) * self.time_step

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time_index": self.time_index,
            "environment": self.environment.to_dict(),
            "power": dict(self.power),
            "total_power": self.total_power,
            "maintenance_power": self.maintenance_power,
            "net_power": self.net_power,
            "storage": self.storage.to_dict(),
            "economics": self.economics.to_dict() if self.economics else None,
            "time_step": self.time_step
        }


class PerformanceHistory:
    """Ordered, bounded sequence of performance records.

    Once more than ``ceiling`` records are held, the oldest are dropped so that
    only the most recent ``retention`` remain. Running totals over the trailing
    ``window`` records back the economic evaluation so that it does not rescan
    the whole history every step.
    """

    def __init__(self, ceiling: int = 10000, retention: int = 8760, window: int = 8760):
        if retention > ceiling:
            raise ValueError("retention cannot exceed ceiling")
        self.ceiling = ceiling
        self.retention = retention
        self.window = window
        self._records: List[PerformanceRecord] = []
        self._window_energy = 0.0
        self._window_hours = 0.0
        self.total_appended = 0

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[PerformanceRecord]:
        return iter(self._records)

    def __getitem__(self, index):
        return self._records[index]

    def __bool__(self) -> bool:
        return bool(self._records)

    @property
    def records(self) -> List[PerformanceRecord]:
        return list(self._records)

    def latest(self) -> Optional[PerformanceRecord]:
        return self._records[-1] if self._records else None

    def recent(self, count: int) -> List[PerformanceRecord]:
        """The most recent ``count`` records, oldest first."""
        if count <= 0:
            return []
        return self._records[-count:]

    def append(self, record: PerformanceRecord) -> bool:
        """Append a record; return True when the history was trimmed."""
        self._records.append(record)
        self.total_appended += 1
        self._window_energy += record.positive_energy
        self._window_hours += record.time_step

        if len(self._records) > self.window:
            leaving = self._records[-self.window - 1]
            self._window_energy -= leaving.positive_energy
            self._window_hours -= leaving.time_step

        if len(self._records) > self.ceiling:
            del self._records[:-self.retention]
            self._recompute_window()
            return True
        return False

    def _recompute_window(self) -> None:
        window = self._records[-self.window:]
        self._window_energy = math.fsum(r.positive_energy for r in window)
        self._window_hours = math.fsum(r.time_step for r in window)

    def window_totals(self) -> Tuple[float, float, int]:
        """Positive net energy (Wh), covered hours and record count of the trailing window."""
        count = min(len(self._records), self.window)
        return max(0.0, self._window_energy), max(0.0, self._window_hours), count

    def clear(self) -> None:
        self._records.clear()
        self._window_energy = 0.0
        self._window_hours = 0.0
        self.total_appended = 0
