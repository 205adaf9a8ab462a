#!/usr/bin/env python3
"""
Setup Check: Supabase table, policies and storage bucket
Probes the configured backend and prints the SQL needed to fix what is missing
"""
import sys
import asyncio
import argparse
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import get_settings
from services.error_classifier import ErrorCategory, classify_error, error_message
from services.project_store import ProjectStore
from services.setup_help import table_missing_help, rls_help, bucket_missing_help
import logging

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Never matches a real user; the probe only needs the query to reach the table
PROBE_OWNER = "00000000-0000-0000-0000-000000000000"


def print_help(help_payload: dict):
    print()
    print(f"== {help_payload['title']} ==")
    print(help_payload["description"])
    for step in help_payload.get("steps", []):
        print(f"  - {step}")
    print()
    print(help_payload["sql"])
    print()
    print(f"Docs: {help_payload['docs_url']}")


async def check_table(store: ProjectStore) -> bool:
    logger.info(f"Checking table '{store.table}'...")
    try:
        await store.list_projects(PROBE_OWNER)
    except Exception as e:
        category = classify_error(e, store.table)
        if category == ErrorCategory.TABLE_MISSING:
            logger.error(f"❌ Table '{store.table}' does not exist")
            print_help(table_missing_help(store.table))
        elif category == ErrorCategory.ACCESS_DENIED:
            logger.error(f"❌ Row-level security blocks access to '{store.table}'")
            print_help(rls_help(store.table))
        else:
            logger.error(f"❌ Table check failed: {error_message(e)}")
        return False

    logger.info(f"✅ Table '{store.table}' is reachable")
    return True


async def check_bucket(store: ProjectStore) -> bool:
    logger.info(f"Checking storage bucket '{store.bucket}'...")
    try:
        await store.list_objects(PROBE_OWNER)
    except Exception as e:
        if classify_error(e, store.table) == ErrorCategory.BUCKET_MISSING:
            logger.error(f"❌ Bucket '{store.bucket}' not found")
            print_help(bucket_missing_help(store.bucket))
        else:
            logger.error(f"❌ Bucket check failed: {error_message(e)}")
        return False

    logger.info(f"✅ Bucket '{store.bucket}' is reachable")
    return True


async def run_checks(table: str = None, bucket: str = None) -> bool:
    store = ProjectStore(table=table, bucket=bucket)
    table_ok = await check_table(store)
    bucket_ok = await check_bucket(store)
    return table_ok and bucket_ok


def main():
    parser = argparse.ArgumentParser(description="Check the Supabase setup used by Rix")
    parser.add_argument("--table", help="Projects table name (default from settings)")
    parser.add_argument("--bucket", help="Storage bucket name (default from settings)")
    args = parser.parse_args()

    if not get_settings().supabase_configured:
        logger.error("SUPABASE_URL and a Supabase key must be set (see .env.example)")
        sys.exit(2)

    ok = asyncio.run(run_checks(args.table, args.bucket))
    if ok:
        logger.info("✅ Supabase setup looks good")
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
