"""
Comparison engine for competitor menu benchmarking
"""

from dataclasses import dataclass, field
from datetime import datetime
from io import BytesIO
from typing import Dict, List, Optional

import httpx
from loguru import logger
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from menu_benchmark import config
from menu_benchmark.database.operations import DatabaseOperations
from menu_benchmark.extraction.html_extractor import extract_competitor_dishes
from menu_benchmark.matching.dish_matcher import DishMatcher, MatchResult
from menu_benchmark.utils import MatchStatus, match_status_to_display


class BenchmarkFetchError(RuntimeError):
    """Competitor page could not be fetched"""


def sanitize_excel_value(value):
    """
    Sanitize value to prevent Excel formula injection

    Excel treats cells starting with =, +, -, @, | as formulas. Competitor
    pages are untrusted input, so text cells get a leading quote.
    """
    if not isinstance(value, str) or not value:
        return value

    if value[0] in ('=', '+', '-', '@', '|'):
        return "'" + value

    return value


@dataclass
class BenchmarkReport:
    """Complete benchmark of one competitor page against one brand"""
    brand: str
    url: str
    results: List[MatchResult]
    analysis_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    # Summary statistics
    total_items: int = 0
    matches: int = 0
    partial_matches: int = 0
    no_matches: int = 0
    average_score: float = 0.0

    def __post_init__(self):
        """Calculate summary statistics"""
        self.total_items = len(self.results)
        self.matches = sum(1 for r in self.results if r.status == MatchStatus.MATCH)
        self.partial_matches = sum(1 for r in self.results if r.status == MatchStatus.PARTIAL_MATCH)
        self.no_matches = self.total_items - self.matches - self.partial_matches

        if self.total_items:
            self.average_score = sum(r.score for r in self.results) / self.total_items

    @property
    def match_rate(self) -> float:
        return (self.matches / self.total_items * 100) if self.total_items else 0.0

    def summary(self) -> Dict:
        return {
            'total_items': self.total_items,
            'matches': self.matches,
            'partial_matches': self.partial_matches,
            'no_matches': self.no_matches,
            'match_rate': f"{self.match_rate:.1f}%",
            'average_score': round(self.average_score, 1),
        }

    def to_dict(self) -> Dict:
        """Convert report to the stored/API representation"""
        return {
            'id': self.analysis_id,
            'date': self.created_at.isoformat(),
            'brand': self.brand,
            'url': self.url,
            'summary': self.summary(),
            'results': [r.to_dict() for r in self.results],
        }

    def to_excel_bytes(self) -> bytes:
        """Render the report as a colour-coded Excel workbook"""
        wb = Workbook()
        ws = wb.active
        ws.title = "Benchmark"

        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        match_fill = PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid")
        partial_fill = PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid")
        no_match_fill = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")

        headers = [
            "Competitor Dish",
            "Competitor Description",
            "Competitor Price",
            "Competitor Promo Price",
            "Status",
            "Score %",
            "Our Dish ID",
            "Our Dish",
            "Our Category",
            "Our Price",
        ]
        currency_columns = [
            idx for idx, header in enumerate(headers, 1)
            if header in ("Competitor Price", "Competitor Promo Price", "Our Price")
        ]

        for col_num, header in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col_num)
            cell.value = header
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center", vertical="center")

        for row_num, result in enumerate(self.results, 2):
            comp = result.candidate
            ours = result.best_reference

            if result.status == MatchStatus.MATCH:
                row_fill = match_fill
            elif result.status == MatchStatus.PARTIAL_MATCH:
                row_fill = partial_fill
            else:
                row_fill = no_match_fill

            row_data = [
                sanitize_excel_value(comp.name),
                sanitize_excel_value(comp.description),
                comp.full_price if comp.full_price else "",
                comp.promo_price if comp.promo_price else "",
                match_status_to_display(result.status),
                result.score,
                sanitize_excel_value(ours.id if ours else ""),
                sanitize_excel_value(ours.name if ours else ""),
                sanitize_excel_value(ours.category if ours else ""),
                ours.full_price if ours and ours.full_price else "",
            ]

            for col_num, value in enumerate(row_data, 1):
                cell = ws.cell(row=row_num, column=col_num)
                cell.value = value
                cell.fill = row_fill
                cell.alignment = Alignment(horizontal="left", vertical="center")
                if col_num in currency_columns and value != "":
                    cell.number_format = '$#,##0.00'

        # Auto-adjust column widths
        for col_num, header in enumerate(headers, 1):
            column_letter = get_column_letter(col_num)
            max_length = max(
                [len(header)] + [len(str(c.value)) for c in ws[column_letter] if c.value is not None]
            )
            ws.column_dimensions[column_letter].width = min(max_length + 2, 50)

        # Summary rows above the table
        ws.insert_rows(1, 3)
        ws['A1'] = f"Menu Benchmark: {self.brand} vs {self.url or 'HTML input'}"
        ws['A1'].font = Font(bold=True, size=14)
        ws['A2'] = f"Generated: {self.created_at.strftime('%Y-%m-%d %H:%M:%S')}"
        ws['A3'] = f"Match Rate: {self.match_rate:.1f}% ({self.matches}/{self.total_items} dishes)"
        ws.freeze_panes = "A5"

        excel_buffer = BytesIO()
        wb.save(excel_buffer)
        return excel_buffer.getvalue()


class ComparisonEngine:
    """Main benchmark engine: fetch, extract, match, persist"""

    def __init__(self, db_path: str = None, matcher: DishMatcher = None):
        """Initialize comparison engine"""
        self.db_ops = DatabaseOperations(db_path)
        self.db_ops.init_database()
        self.matcher = matcher or DishMatcher()

    def fetch_html(self, url: str) -> str:
        """
        Download a competitor page

        Raises:
            BenchmarkFetchError: on transport errors, HTTP status >= 400 or
                a body larger than HTTP_MAX_BYTES
        """
        logger.info("Fetching competitor page: {}", url)
        try:
            with httpx.Client(
                headers={"User-Agent": config.HTTP_USER_AGENT},
                follow_redirects=True,
                timeout=config.HTTP_TIMEOUT,
            ) as client:
                response = client.get(url)
        except httpx.HTTPError as e:
            raise BenchmarkFetchError(f"Could not fetch {url}: {e}") from e

        if response.status_code >= 400:
            raise BenchmarkFetchError(f"Could not fetch {url} (HTTP {response.status_code})")
        if len(response.content) > config.HTTP_MAX_BYTES:
            raise BenchmarkFetchError(
                f"Page too large ({len(response.content)} bytes > {config.HTTP_MAX_BYTES}) for {url}"
            )

        return response.text

    def benchmark_html(self, brand: str, html: str, url: str = "") -> BenchmarkReport:
        """
        Compare an already fetched page against one brand's dishes

        Args:
            brand: Brand whose dishes are the references
            html: Competitor page markup
            url: Source of the markup, for the report

        Returns:
            BenchmarkReport (not persisted)
        """
        brand = (brand or "").strip()
        if not brand:
            raise ValueError("brand is required")

        references = self.db_ops.get_references(brand)
        if not references:
            raise LookupError(f"No dishes found for brand '{brand}'")

        candidates = extract_competitor_dishes(html or "")
        results = self.matcher.compare(references, candidates)

        report = BenchmarkReport(brand=brand, url=url, results=results)
        logger.info(
            "Benchmark for {}: {} dishes, {} matches, {} partial",
            brand, report.total_items, report.matches, report.partial_matches
        )
        return report

    def run_benchmark(self, brand: str, url: str) -> BenchmarkReport:
        """Fetch a competitor page, compare it and store the run in history"""
        brand = (brand or "").strip()
        url = (url or "").strip()
        if not brand or not url:
            raise ValueError("brand and url are required")

        # Check the brand before spending a request on the page
        if not self.db_ops.list_dishes(brand):
            raise LookupError(f"No dishes found for brand '{brand}'")

        html = self.fetch_html(url)
        report = self.benchmark_html(brand, html, url=url)

        stored = self.db_ops.save_analysis({
            'brand': report.brand,
            'url': report.url,
            'results': [r.to_dict() for r in report.results],
            'created_at': report.created_at,
        })
        report.analysis_id = stored['id']

        return report
