"""Database module"""

from .schema import Dish, BenchmarkAnalysis, init_database, get_session
from .operations import DatabaseOperations, DishNotFoundError, AnalysisNotFoundError

__all__ = [
    'Dish', 'BenchmarkAnalysis',
    'init_database', 'get_session',
    'DatabaseOperations', 'DishNotFoundError', 'AnalysisNotFoundError',
]
