"""
Menu Benchmark

Extract dishes from competitor menu pages and match each one against our
own catalog to find the closest equivalent.
"""

__version__ = "1.0.0"

from .comparison_engine import ComparisonEngine, BenchmarkReport
from .extraction import extract
from .matching import compare

__all__ = ["ComparisonEngine", "BenchmarkReport", "extract", "compare"]
