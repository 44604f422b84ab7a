"""
MCP Server for Menu Benchmarking
"""

import json
import os
import random
import re
from datetime import datetime
from functools import lru_cache
from io import StringIO
from typing import Any, Dict, List, Optional

from loguru import logger
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from menu_benchmark import config
from menu_benchmark.comparison_engine import BenchmarkReport, ComparisonEngine


# Initialize server
app = Server("menu-benchmark")

DISH_PROPERTIES = {
    "id": {"type": "string", "description": "Dish ID (unique)"},
    "brand": {"type": "string", "description": "Brand the dish belongs to"},
    "category": {"type": "string", "description": "Menu category (e.g., 'Hamburguesas')"},
    "name": {"type": "string", "description": "Dish name"},
    "description": {"type": "string", "description": "Dish description"},
    "image": {"type": "string", "description": "Image URL"},
    "fullPrice": {"type": "number", "description": "Regular price"},
    "promoPrice": {"type": "number", "description": "Promotional price (optional)"},
    "discount": {"type": "number", "description": "Discount percentage (optional)"},
}


@lru_cache(maxsize=1)
def get_engine() -> ComparisonEngine:
    """Engine bound to the configured database, created on first use"""
    logger.info("Using database at {}", config.DB_PATH)
    return ComparisonEngine(db_path=config.DB_PATH)


def save_excel_report(report: BenchmarkReport) -> str:
    """Write the report workbook to REPORTS_DIR and return its path"""
    os.makedirs(config.REPORTS_DIR, exist_ok=True)

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    # Random suffix so runs within the same second do not overwrite each other
    random_suffix = random.randint(1000, 9999)
    brand = re.sub(r'[^\w-]+', '_', report.brand).strip('_') or 'brand'
    filename = f"menu_benchmark_{brand}_{timestamp}_{random_suffix}.xlsx"
    filepath = os.path.join(config.REPORTS_DIR, filename)

    with open(filepath, 'wb') as f:
        f.write(report.to_excel_bytes())

    logger.info("Excel report saved at {}", filepath)
    return filepath


@app.list_tools()
async def list_tools() -> List[Tool]:
    """List available tools"""
    return [
        Tool(
            name="list_dishes",
            description="List our catalog dishes, optionally only those of one brand.",
            inputSchema={
                "type": "object",
                "properties": {
                    "brand": {"type": "string", "description": "Brand filter (case-insensitive, optional)"}
                },
                "required": []
            }
        ),
        Tool(
            name="save_dish",
            description="Create a dish, or replace the dish with the same ID.",
            inputSchema={
                "type": "object",
                "properties": DISH_PROPERTIES,
                "required": ["id", "brand", "name"]
            }
        ),
        Tool(
            name="update_dish",
            description="Update some fields of an existing dish. Fields not given keep their values.",
            inputSchema={
                "type": "object",
                "properties": DISH_PROPERTIES,
                "required": ["id"]
            }
        ),
        Tool(
            name="delete_dish",
            description="Delete a dish by ID.",
            inputSchema={
                "type": "object",
                "properties": {"id": {"type": "string", "description": "Dish ID"}},
                "required": ["id"]
            }
        ),
        Tool(
            name="import_dishes",
            description="Bulk create/update dishes from CSV. Columns: id,brand,category,name,description,image,fullPrice,promoPrice,discount. Rows without id are skipped.",
            inputSchema={
                "type": "object",
                "properties": {
                    "csv_content": {"type": "string", "description": "CSV content including the header row"}
                },
                "required": ["csv_content"]
            }
        ),
        Tool(
            name="run_benchmark",
            description="Fetch a competitor menu page, extract its dishes and match each one against our dishes of the given brand. The run is saved in history and an Excel report is written to the reports folder.",
            inputSchema={
                "type": "object",
                "properties": {
                    "brand": {"type": "string", "description": "Our brand to compare against"},
                    "url": {"type": "string", "description": "Competitor menu page URL"}
                },
                "required": ["brand", "url"]
            }
        ),
        Tool(
            name="benchmark_html",
            description="Same as run_benchmark but for HTML content supplied directly. Not saved in history; the Excel report is still written.",
            inputSchema={
                "type": "object",
                "properties": {
                    "brand": {"type": "string", "description": "Our brand to compare against"},
                    "html": {"type": "string", "description": "Competitor page HTML"}
                },
                "required": ["brand", "html"]
            }
        ),
        Tool(
            name="list_history",
            description="List past benchmark runs, newest first.",
            inputSchema={"type": "object", "properties": {}, "required": []}
        ),
        Tool(
            name="get_analysis",
            description="Show the full results of a past benchmark run.",
            inputSchema={
                "type": "object",
                "properties": {"id": {"type": "string", "description": "Analysis ID from list_history"}},
                "required": ["id"]
            }
        ),
    ]


@app.call_tool()
async def call_tool(name: str, arguments: Any) -> List[TextContent]:
    """Handle tool calls"""
    arguments = arguments or {}

    try:
        engine = get_engine()
        db_ops = engine.db_ops

        if name == "list_dishes":
            dishes = db_ops.list_dishes(arguments.get("brand"))
            return [TextContent(type="text", text=format_dishes(dishes))]

        elif name == "save_dish":
            dish, created = db_ops.upsert_dish(arguments)
            verb = "Created" if created else "Replaced"
            return [TextContent(type="text", text=f"✅ {verb} dish `{dish['id']}`: {dish['name']}")]

        elif name == "update_dish":
            fields = {k: v for k, v in arguments.items() if k != "id"}
            dish = db_ops.update_dish(str(arguments["id"]), fields)
            return [TextContent(type="text", text=f"✅ Updated dish `{dish['id']}`: {dish['name']}")]

        elif name == "delete_dish":
            db_ops.delete_dish(str(arguments["id"]))
            return [TextContent(type="text", text=f"✅ Deleted dish `{arguments['id']}`")]

        elif name == "import_dishes":
            stats = db_ops.load_dishes_csv(StringIO(arguments["csv_content"]))
            return [TextContent(
                type="text",
                text=(
                    f"✅ Import complete\n"
                    f"- Created: {stats['created']}\n"
                    f"- Updated: {stats['updated']}\n"
                    f"- Skipped (no id): {stats['skipped']}\n"
                    f"- Total dishes: {stats['total']}"
                )
            )]

        elif name == "run_benchmark":
            report = engine.run_benchmark(arguments["brand"], arguments["url"])
            return [TextContent(type="text", text=format_benchmark_report(report.to_dict(), save_excel_report(report)))]

        elif name == "benchmark_html":
            report = engine.benchmark_html(arguments["brand"], arguments["html"])
            return [TextContent(type="text", text=format_benchmark_report(report.to_dict(), save_excel_report(report)))]

        elif name == "list_history":
            return [TextContent(type="text", text=format_history(db_ops.list_history()))]

        elif name == "get_analysis":
            analysis = db_ops.get_analysis(str(arguments["id"]))
            return [TextContent(type="text", text=format_benchmark_report(analysis))]

        else:
            return [TextContent(type="text", text=f"Unknown tool: {name}")]

    except Exception as e:
        logger.exception("Tool {} failed", name)
        return [TextContent(type="text", text=f"❌ Error: {str(e)}")]


def format_dishes(dishes: List[Dict]) -> str:
    """Format a dish listing"""
    if not dishes:
        return "No dishes found"

    response = f"# Dishes ({len(dishes)})\n\n"
    for dish in dishes:
        price = f"${dish['fullPrice']:.2f}" if dish.get('fullPrice') else "N/A"
        response += f"- `{dish['id']}` **{dish['name']}** ({dish['brand']} / {dish['category'] or 'N/A'}) {price}\n"
    return response


def format_history(history: List[Dict]) -> str:
    """Format benchmark history"""
    if not history:
        return "No benchmark runs yet"

    response = "# Benchmark History\n\n"
    for entry in history:
        response += f"- `{entry['id']}` {entry['date']} | {entry['brand']} | {entry['url']} | {entry['totalResults']} dishes\n"
    return response


def format_benchmark_report(report: Dict, excel_path: Optional[str] = None) -> str:
    """Format benchmark results (fresh report or stored analysis)"""
    results = report.get("results", [])

    response = f"""# Menu Benchmark Report

- **ID**: {report.get("id") or "not saved"}
- **Brand**: {report["brand"]}
- **URL**: {report.get("url") or "N/A"}
- **Competitor dishes**: {len(results)}
"""
    summary = report.get("summary")
    if summary:
        response += f"- **Match Rate**: {summary['match_rate']}\n"
        response += f"  - Matches: {summary['matches']}\n"
        response += f"  - Partial matches: {summary['partial_matches']}\n"
        response += f"  - No match: {summary['no_matches']}\n"

    response += "\n## Detailed Results\n"

    for i, item in enumerate(results, 1):
        comp = item["competitor"]
        ours = item.get("ours")

        response += f"\n### {i}. {comp['name']}\n"
        if comp.get("description"):
            response += f"- **Description**: {comp['description']}\n"
        if comp.get("fullPrice"):
            response += f"- **Price**: ${comp['fullPrice']:.2f}"
            if comp.get("promoPrice"):
                response += f" (promo ${comp['promoPrice']:.2f})"
            response += "\n"

        label = item.get("statusLabel") or item["status"]
        if ours:
            response += f"- **Ours**: {ours['name']} (`{ours['id']}`) - {item['matchScore']:.1f}% {label}\n"
        else:
            response += f"- **Ours**: ❌ no reference dishes - {label}\n"

    if excel_path:
        response += "\n📊 **Excel Report Generated**\n"
        response += f"✅ File saved at:\n   `{excel_path}`\n"
        response += "- Color-coded rows (green=match, yellow=partial match, red=no match)\n"

    return response


async def async_main():
    """Run the MCP server"""
    async with stdio_server() as (read_stream, write_stream):
        await app.run(
            read_stream,
            write_stream,
            app.create_initialization_options()
        )


def main():
    """Entry point for the MCP server"""
    import asyncio
    asyncio.run(async_main())


if __name__ == "__main__":
    main()
