"""
Configuration constants for menu benchmarking
"""

import os
from types import MappingProxyType


# Scoring weights (must be non-negative and sum to 1)
SCORE_WEIGHTS = MappingProxyType({
    'name_jaccard': 0.30,
    'name_dice': 0.20,
    'name_edit': 0.16,
    'description_jaccard': 0.12,
    'cross_signal': 0.12,
    'containment': 0.05,
    'price': 0.05,
})

# Price similarity used when either side has no usable price
PRICE_ABSENT_SCORE = 0.25

# Status bands (0-1 similarity)
MATCH_THRESHOLD = 0.50
PARTIAL_MATCH_THRESHOLD = 0.30

# HTML extraction bounds
MAX_CANDIDATES = 80
MAX_BLOCKS = 900
MAX_DESCRIPTION_LINES = 3
TITLE_MIN_LENGTH = 5
TITLE_MAX_LENGTH = 89
CURRENCY_MARKER = "$"

# Storage in the user's home directory, overridable for deployments and tests
DATA_DIR = os.path.expanduser(os.environ.get('MENU_BENCHMARK_HOME', '~/.menu-benchmark'))
DB_PATH = os.path.join(DATA_DIR, 'menu_benchmark.db')

# Excel reports written by the benchmark tools
REPORTS_DIR = os.path.expanduser(os.environ.get('MENU_BENCHMARK_REPORTS', os.path.join(DATA_DIR, 'reports')))

# Newest analyses kept in history
HISTORY_LIMIT = 100

# Competitor page fetching
HTTP_TIMEOUT = float(os.environ.get('MENU_BENCHMARK_HTTP_TIMEOUT', '15'))
HTTP_MAX_BYTES = 5 * 1024 * 1024
HTTP_USER_AGENT = "Atomic Benchmark Bot"
