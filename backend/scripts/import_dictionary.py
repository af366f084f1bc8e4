#!/usr/bin/env python3
"""
将 DATA_DIR 下的 JSON 词典文件导入数据库

导入后设置 DICTIONARY_DATABASE_URL 即可改用数据库数据源启动。

Usage:
    python backend/scripts/import_dictionary.py --database-url sqlite:///data/dictionary.db [--data-dir PATH]
"""
import argparse
import logging
import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import DATA_DIR, DICTIONARY_TERM_BANK_COUNT
from app.database import create_db_engine, create_session_factory, init_db
from app.services.dictionary_loader import import_json_into_database

logger = logging.getLogger(__name__)


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    parser = argparse.ArgumentParser(
        description="Import Yomichan-format JSON dictionary banks into a database"
    )
    parser.add_argument(
        '--database-url', '-d',
        required=True,
        help="SQLAlchemy database URL, e.g. sqlite:///data/dictionary.db"
    )
    parser.add_argument(
        '--data-dir',
        type=Path,
        default=Path(DATA_DIR),
        help=f"Directory containing term_bank_*.json (default: {DATA_DIR})"
    )
    parser.add_argument(
        '--term-bank-count', '-n',
        type=int,
        default=DICTIONARY_TERM_BANK_COUNT,
        help=f"Number of term_bank_N.json files (default: {DICTIONARY_TERM_BANK_COUNT})"
    )

    args = parser.parse_args()

    if not args.data_dir.is_dir():
        logger.error(f"Data directory not found: {args.data_dir}")
        sys.exit(1)

    engine = create_db_engine(args.database_url)
    init_db(engine)
    db = create_session_factory(engine)()
    try:
        result = import_json_into_database(db, str(args.data_dir), term_bank_count=args.term_bank_count)
    finally:
        db.close()

    if not len(result.store):
        logger.error("No dictionary entries loaded, nothing to import")
        sys.exit(1)

    logger.info(f"Imported {len(result.store)} entries ({len(result.warnings)} warnings)")


if __name__ == '__main__':
    main()
