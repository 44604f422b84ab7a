#!/usr/bin/env python3
"""
Import a CSV of dishes into the database

Columns: id, brand, category, name, description, image, fullPrice,
promoPrice, discount (snake_case variants accepted). Existing dishes are
updated, new ids are created.

Usage:
    menu-benchmark-import dishes.csv
    menu-benchmark-import dishes.csv other.db  # Use/create another database
"""

import os
import sys

from menu_benchmark import config
from menu_benchmark.database.operations import DatabaseOperations


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv

    if not argv:
        print("Usage: menu-benchmark-import <dishes.csv> [db_path]")
        print("\nExamples:")
        print("  # Import into the default database")
        print("  menu-benchmark-import dishes.csv")
        print()
        print("  # Import into another database (created if missing)")
        print("  menu-benchmark-import dishes.csv ~/.menu-benchmark/other.db")
        return 1

    csv_path = argv[0]
    db_path = argv[1] if len(argv) >= 2 else config.DB_PATH

    if not os.path.exists(csv_path):
        print(f"❌ Error: File not found: {csv_path}")
        return 1

    print("=" * 80)
    print("DISH CSV IMPORT")
    print("=" * 80)
    print(f"Input: {csv_path}")
    print(f"Database: {db_path}")
    print("=" * 80 + "\n")

    db_ops = DatabaseOperations(db_path=db_path)
    db_ops.init_database()

    try:
        stats = db_ops.load_dishes_csv(csv_path)
    except ValueError as e:
        print(f"❌ Error: {e}")
        return 1

    print("✅ Import complete!")
    print(f"   Dishes created: {stats['created']}")
    print(f"   Dishes updated: {stats['updated']}")
    print(f"   Rows skipped:   {stats['skipped']}")
    print(f"   Total dishes:   {stats['total']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
