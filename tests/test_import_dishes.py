from menu_benchmark.database.operations import DatabaseOperations
from menu_benchmark.tools.import_dishes import main


def test_import_csv_file(tmp_path, capsys):
    csv_path = tmp_path / "dishes.csv"
    csv_path.write_text(
        "id,brand,category,name,fullPrice\n"
        "atm-001,Atomic,Hamburguesas,Hamburguesa Doble,6.50\n"
        "atm-002,Atomic,Acompañamientos,Papas Fritas,2.50\n",
        encoding="utf-8",
    )
    db_path = str(tmp_path / "data" / "dishes.db")

    assert main([str(csv_path), db_path]) == 0

    assert "Dishes created: 2" in capsys.readouterr().out
    dishes = DatabaseOperations(db_path).list_dishes("Atomic")
    assert [d["name"] for d in dishes] == ["Hamburguesa Doble", "Papas Fritas"]


def test_import_usage_and_missing_file(tmp_path, capsys):
    assert main([]) == 1
    assert "Usage" in capsys.readouterr().out

    assert main([str(tmp_path / "missing.csv")]) == 1
    assert "File not found" in capsys.readouterr().out


def test_import_rejects_csv_without_id(tmp_path, capsys):
    csv_path = tmp_path / "dishes.csv"
    csv_path.write_text("brand,name\nAtomic,Limonada\n", encoding="utf-8")

    assert main([str(csv_path), str(tmp_path / "dishes.db")]) == 1
    assert "Missing required columns" in capsys.readouterr().out
