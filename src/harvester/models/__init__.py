"""
Stateful models of the harvesting installation.
"""

from .storage import StorageState, StorageSnapshot, StorageModel
from .history import PerformanceRecord, PerformanceHistory

__all__ = [
    'StorageState',
    'StorageSnapshot',
    'StorageModel',
    'PerformanceRecord',
    'PerformanceHistory'
]
