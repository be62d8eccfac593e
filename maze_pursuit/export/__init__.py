"""I/O package for the pursuit simulation."""

from .csv_writer import FrameCSVWriter, MetricsCSVWriter
from .reporter import Reporter, format_comparison

__all__ = ['FrameCSVWriter', 'MetricsCSVWriter', 'Reporter', 'format_comparison']
