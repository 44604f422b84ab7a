import pytest

from menu_benchmark.comparison_engine import ComparisonEngine
from menu_benchmark.database.operations import DatabaseOperations


ATOMIC_DISHES = [
    {
        "id": "atm-001",
        "brand": "Atomic",
        "category": "Hamburguesas",
        "name": "Hamburguesa Doble",
        "description": "carne doble con queso",
        "fullPrice": 6.5,
    },
    {
        "id": "atm-002",
        "brand": "Atomic",
        "category": "Acompañamientos",
        "name": "Papas Fritas",
        "description": "porción grande",
        "fullPrice": 2.5,
    },
    {
        "id": "neb-001",
        "brand": "Nebula",
        "category": "Pizzas",
        "name": "Pizza Napolitana",
        "description": "tomate y albahaca",
        "fullPrice": 9.0,
    },
]

COMPETITOR_HTML = """
<html>
<head><title>Menu</title></head>
<body>
<article class="dish"><h3>Hamburguesa Doble Clásica</h3><p>Doble carne y queso</p><span>$6.00</span></article>
<article class="dish"><h3>Papas fritas grandes</h3><p>Porción para compartir</p><span>$2.80</span></article>
<article class="dish"><h3>Ensalada César</h3><p>Lechuga, pollo y crutones</p><span>$7.20</span></article>
</body>
</html>
"""


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "menu_benchmark.db")


@pytest.fixture
def db_ops(db_path):
    ops = DatabaseOperations(db_path=db_path)
    ops.init_database()
    return ops


@pytest.fixture
def engine(db_path):
    engine = ComparisonEngine(db_path=db_path)
    engine.db_ops.bulk_upsert(ATOMIC_DISHES)
    return engine
