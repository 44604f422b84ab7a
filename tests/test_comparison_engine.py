import httpx
import pytest

from menu_benchmark import config
from menu_benchmark.comparison_engine import (
    BenchmarkFetchError,
    BenchmarkReport,
    sanitize_excel_value,
)
from menu_benchmark.utils import MatchStatus

from conftest import COMPETITOR_HTML


class DummyResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text
        self.content = text.encode("utf-8")


def test_benchmark_html_matches_against_brand(engine):
    report = engine.benchmark_html("atomic", COMPETITOR_HTML)

    assert isinstance(report, BenchmarkReport)
    assert report.total_items == 3

    burger, fries, salad = report.results
    assert burger.candidate.name == "Hamburguesa Doble Clásica"
    assert burger.best_reference.id == "atm-001"
    assert burger.status == MatchStatus.MATCH
    assert fries.best_reference.id == "atm-002"
    assert fries.status != MatchStatus.NO_MATCH
    assert salad.status == MatchStatus.NO_MATCH
    # Nebula dishes are not references for Atomic
    assert all(r.best_reference.brand == "Atomic" for r in report.results)


def test_benchmark_html_with_no_dishes_on_page(engine):
    report = engine.benchmark_html("Atomic", "<html><body>Cerrado</body></html>")

    assert report.results == []
    assert report.summary()["match_rate"] == "0.0%"


def test_benchmark_html_unknown_brand(engine):
    with pytest.raises(LookupError):
        engine.benchmark_html("Quasar", COMPETITOR_HTML)
    with pytest.raises(ValueError):
        engine.benchmark_html("  ", COMPETITOR_HTML)


def test_report_summary_and_dict(engine):
    report = engine.benchmark_html("Atomic", COMPETITOR_HTML, url="https://example.com/menu")

    summary = report.summary()
    assert summary["total_items"] == 3
    assert summary["matches"] + summary["partial_matches"] + summary["no_matches"] == 3
    assert summary["no_matches"] >= 1

    data = report.to_dict()
    assert data["id"] is None
    assert data["url"] == "https://example.com/menu"
    first = data["results"][0]
    assert set(first) == {"competitor", "ours", "matchScore", "status", "statusLabel"}
    assert first["competitor"]["fullPrice"] == 6.0
    assert first["ours"]["id"] == "atm-001"
    assert first["statusLabel"] == "Coincidencia"


def test_run_benchmark_saves_history(engine, monkeypatch):
    fetched = []

    def fake_fetch(url):
        fetched.append(url)
        return COMPETITOR_HTML

    monkeypatch.setattr(engine, "fetch_html", fake_fetch)

    report = engine.run_benchmark("Atomic", " https://example.com/menu ")

    assert fetched == ["https://example.com/menu"]
    assert report.analysis_id.startswith("analysis-")

    history = engine.db_ops.list_history()
    assert len(history) == 1
    assert history[0]["id"] == report.analysis_id
    assert history[0]["totalResults"] == 3

    stored = engine.db_ops.get_analysis(report.analysis_id)
    assert stored["results"] == report.to_dict()["results"]


def test_run_benchmark_validates_before_fetching(engine, monkeypatch):
    def fail_fetch(url):
        raise AssertionError("should not fetch")

    monkeypatch.setattr(engine, "fetch_html", fail_fetch)

    with pytest.raises(ValueError):
        engine.run_benchmark("Atomic", "")
    with pytest.raises(LookupError):
        engine.run_benchmark("Quasar", "https://example.com/menu")
    assert engine.db_ops.list_history() == []


def test_fetch_html_returns_text(engine, monkeypatch):
    def fake_get(self, url, *args, **kwargs):
        return DummyResponse(200, "<html>ok</html>")

    monkeypatch.setattr(httpx.Client, "get", fake_get)

    assert engine.fetch_html("https://example.com/menu") == "<html>ok</html>"


def test_fetch_html_http_error_status(engine, monkeypatch):
    def fake_get(self, url, *args, **kwargs):
        return DummyResponse(404, "not found")

    monkeypatch.setattr(httpx.Client, "get", fake_get)

    with pytest.raises(BenchmarkFetchError, match="404"):
        engine.fetch_html("https://example.com/missing")


def test_fetch_html_transport_error(engine, monkeypatch):
    def fake_get(self, url, *args, **kwargs):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(httpx.Client, "get", fake_get)

    with pytest.raises(BenchmarkFetchError):
        engine.fetch_html("https://example.com/menu")


def test_fetch_html_rejects_large_pages(engine, monkeypatch):
    monkeypatch.setattr(config, "HTTP_MAX_BYTES", 10)

    def fake_get(self, url, *args, **kwargs):
        return DummyResponse(200, "<html>" + "x" * 100 + "</html>")

    monkeypatch.setattr(httpx.Client, "get", fake_get)

    with pytest.raises(BenchmarkFetchError, match="too large"):
        engine.fetch_html("https://example.com/menu")


def test_excel_export(engine):
    report = engine.benchmark_html("Atomic", COMPETITOR_HTML)

    data = report.to_excel_bytes()

    # xlsx files are zip archives
    assert data[:2] == b"PK"


def test_sanitize_excel_value():
    assert sanitize_excel_value("=HYPERLINK(\"x\")") == "'=HYPERLINK(\"x\")"
    assert sanitize_excel_value("Pizza") == "Pizza"
    assert sanitize_excel_value(5.0) == 5.0
