"""
Database operations for managing dishes and benchmark history
"""

import json
import time
from typing import Dict, List, Mapping, Optional, Tuple

import pandas as pd
from loguru import logger
from sqlalchemy.orm import Session

from menu_benchmark import config
from menu_benchmark.models import ReferenceItem
from menu_benchmark.utils import parse_price
from .schema import BenchmarkAnalysis, Dish, get_session, init_database


class DishNotFoundError(LookupError):
    """Raised when a dish id does not exist"""


class AnalysisNotFoundError(LookupError):
    """Raised when a benchmark analysis id does not exist"""


# CSV headers accepted for each dish field (compared lowercased)
CSV_COLUMN_ALIASES = {
    'id': 'id',
    'dish_id': 'id',
    'brand': 'brand',
    'category': 'category',
    'name': 'name',
    'description': 'description',
    'image': 'image',
    'fullprice': 'fullPrice',
    'full_price': 'fullPrice',
    'price': 'fullPrice',
    'promoprice': 'promoPrice',
    'promo_price': 'promoPrice',
    'discount': 'discount',
}


def normalize_dish_keys(data: Mapping) -> Dict:
    """Map snake_case and alias keys (full_price, dish_id, price) to the API names"""
    return {CSV_COLUMN_ALIASES.get(str(k).strip().lower(), k): v for k, v in data.items()}


def sanitize_dish(data: Mapping) -> Dict:
    """
    Coerce a loosely typed dish record into storable fields

    Strings are stripped, a missing full price becomes 0 and blank promo
    price or discount become None.
    """
    data = normalize_dish_keys(data)

    def text(key):
        value = data.get(key)
        return '' if value is None else str(value).strip()

    full_price = data.get('fullPrice')
    promo_price = data.get('promoPrice')

    return {
        'dish_id': text('id'),
        'brand': text('brand'),
        'category': text('category'),
        'name': text('name'),
        'description': text('description'),
        'image': text('image'),
        'full_price': parse_price(full_price) or 0.0,
        'promo_price': parse_price(promo_price),
        'discount': parse_price(data.get('discount')),
    }


def _apply(dish: Dish, fields: Dict) -> None:
    for key, value in fields.items():
        setattr(dish, key, value)


class DatabaseOperations:
    """Handle all database operations"""

    def __init__(self, db_path: str = None):
        self.db_path = db_path or config.DB_PATH

    def init_database(self):
        """Create tables if they do not exist"""
        return init_database(self.db_path)

    def get_session(self) -> Session:
        """Get a new database session"""
        return get_session(self.db_path)

    # ------------------------------------------------------------------
    # Dishes
    # ------------------------------------------------------------------

    def list_dishes(self, brand: Optional[str] = None) -> List[Dict]:
        """List dishes, optionally for one brand (case-insensitive)"""
        session = self.get_session()
        try:
            dishes = session.query(Dish).order_by(Dish.id).all()
            if brand is not None:
                wanted = brand.strip().casefold()
                dishes = [d for d in dishes if (d.brand or '').casefold() == wanted]
            return [d.to_dict() for d in dishes]
        finally:
            session.close()

    def get_references(self, brand: str) -> List[ReferenceItem]:
        """Dishes of one brand as matcher references, in insertion order"""
        return [ReferenceItem.from_dict(d) for d in self.list_dishes(brand)]

    def get_dish(self, dish_id: str) -> Dict:
        session = self.get_session()
        try:
            dish = session.query(Dish).filter_by(dish_id=dish_id).first()
            if not dish:
                raise DishNotFoundError(f"Dish not found: {dish_id}")
            return dish.to_dict()
        finally:
            session.close()

    def upsert_dish(self, data: Mapping) -> Tuple[Dict, bool]:
        """
        Create or replace a dish

        Args:
            data: Dish fields; 'id' is required

        Returns:
            (stored dish, created) where created is False on replacement
        """
        fields = sanitize_dish(data)
        if not fields['dish_id']:
            raise ValueError("Dish id is required")

        session = self.get_session()
        try:
            dish = session.query(Dish).filter_by(dish_id=fields['dish_id']).first()
            created = dish is None
            if created:
                dish = Dish()
                session.add(dish)
            _apply(dish, fields)
            session.commit()

            logger.info("{} dish {}", "Created" if created else "Replaced", fields['dish_id'])
            return dish.to_dict(), created
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def update_dish(self, dish_id: str, data: Mapping) -> Dict:
        """Merge fields into an existing dish (the id cannot change)"""
        session = self.get_session()
        try:
            dish = session.query(Dish).filter_by(dish_id=dish_id).first()
            if not dish:
                raise DishNotFoundError(f"Dish not found: {dish_id}")

            merged = {**dish.to_dict(), **normalize_dish_keys(data), 'id': dish_id}
            _apply(dish, sanitize_dish(merged))
            session.commit()
            return dish.to_dict()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def delete_dish(self, dish_id: str) -> None:
        session = self.get_session()
        try:
            deleted = session.query(Dish).filter_by(dish_id=dish_id).delete()
            if not deleted:
                raise DishNotFoundError(f"Dish not found: {dish_id}")
            session.commit()
            logger.info("Deleted dish {}", dish_id)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def bulk_upsert(self, rows: List[Mapping]) -> Dict[str, int]:
        """
        Create or update many dishes in one transaction

        Rows without an id are skipped. Existing dishes keep the fields a
        row does not mention.

        Returns:
            Dict with created, updated and total dish counts
        """
        if not rows:
            raise ValueError("At least one row is required")

        session = self.get_session()
        stats = {"created": 0, "updated": 0, "skipped": 0}

        try:
            for row_num, row in enumerate(rows, start=1):
                fields = sanitize_dish(row)
                if not fields['dish_id']:
                    logger.warning("Row {}: missing dish id, skipping", row_num)
                    stats["skipped"] += 1
                    continue

                dish = session.query(Dish).filter_by(dish_id=fields['dish_id']).first()
                if dish:
                    _apply(dish, sanitize_dish({**dish.to_dict(), **normalize_dish_keys(row)}))
                    stats["updated"] += 1
                else:
                    dish = Dish()
                    _apply(dish, fields)
                    session.add(dish)
                    stats["created"] += 1
                # Rows may repeat an id within one batch
                session.flush()

            session.commit()
            stats["total"] = session.query(Dish).count()

            logger.info(
                "Bulk import: {} created, {} updated, {} skipped",
                stats["created"], stats["updated"], stats["skipped"]
            )
            return stats
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def load_dishes_csv(self, source) -> Dict[str, int]:
        """
        Load dishes from a CSV file path or buffer

        Expected columns: id, brand, category, name, description, image,
        fullPrice, promoPrice, discount (snake_case variants accepted).
        """
        df = pd.read_csv(source, dtype=str, keep_default_na=False)
        df = df.rename(columns=lambda c: CSV_COLUMN_ALIASES.get(str(c).strip().lower(), str(c).strip()))

        # Validate required columns exist
        required_columns = ['id']
        missing_columns = [col for col in required_columns if col not in df.columns]
        if missing_columns:
            raise ValueError(f"Missing required columns: {', '.join(missing_columns)}. "
                             f"Available columns: {', '.join(df.columns)}")

        known = [c for c in df.columns if c in CSV_COLUMN_ALIASES.values()]
        rows = df[known].to_dict(orient='records')

        # Blank cells must not erase stored values on update
        rows = [{k: v for k, v in row.items() if v != '' or k == 'id'} for row in rows]

        return self.bulk_upsert(rows)

    # ------------------------------------------------------------------
    # Benchmark history
    # ------------------------------------------------------------------

    def save_analysis(self, analysis: Mapping) -> Dict:
        """
        Store a benchmark run, keeping only the newest HISTORY_LIMIT entries

        Args:
            analysis: Dict with brand, url, results and optional id

        Returns:
            Stored analysis as returned by get_analysis
        """
        session = self.get_session()
        try:
            analysis_id = analysis.get('id') or f"analysis-{int(time.time() * 1000)}"
            while session.query(BenchmarkAnalysis).filter_by(analysis_id=analysis_id).first():
                analysis_id = f"{analysis_id}-1"

            results = list(analysis.get('results') or [])
            entry = BenchmarkAnalysis(
                analysis_id=analysis_id,
                brand=analysis['brand'],
                url=analysis.get('url', ''),
                total_results=len(results),
                results_json=json.dumps(results, ensure_ascii=False)
            )
            if analysis.get('created_at') is not None:
                entry.created_at = analysis['created_at']
            session.add(entry)
            session.flush()

            stale = (
                session.query(BenchmarkAnalysis.id)
                .order_by(BenchmarkAnalysis.id.desc())
                .offset(config.HISTORY_LIMIT)
                .all()
            )
            if stale:
                session.query(BenchmarkAnalysis).filter(
                    BenchmarkAnalysis.id.in_([row.id for row in stale])
                ).delete(synchronize_session=False)

            session.commit()
            return entry.to_dict()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def list_history(self) -> List[Dict]:
        """Summaries of stored analyses, newest first"""
        session = self.get_session()
        try:
            entries = session.query(BenchmarkAnalysis).order_by(BenchmarkAnalysis.id.desc()).all()
            return [e.to_summary() for e in entries]
        finally:
            session.close()

    def get_analysis(self, analysis_id: str) -> Dict:
        session = self.get_session()
        try:
            entry = session.query(BenchmarkAnalysis).filter_by(analysis_id=analysis_id).first()
            if not entry:
                raise AnalysisNotFoundError(f"Analysis not found: {analysis_id}")
            return entry.to_dict()
        finally:
            session.close()
