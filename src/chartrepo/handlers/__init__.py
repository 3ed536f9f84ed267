"""Chart metadata readers used by the scanner."""

from .base import ChartMetadataReader
from .chart import TarballChartReader

__all__ = [
    "ChartMetadataReader",
    "TarballChartReader",
]
