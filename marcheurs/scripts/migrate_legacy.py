"""
Legacy Gallery Migration Script
Imports the old PHP slideshow tree (one folder per outing, named
YYYY_MM_DD_Title) into the hikes and photos tables and the photos bucket.
Safe to run again: existing hikes and photo rows are reused.

Usage: python -m marcheurs.scripts.migrate_legacy [SOURCE_DIR] [--bucket photos]
"""

import argparse
import re
import sys
from dataclasses import dataclass, field, asdict
from datetime import date
from pathlib import Path
from typing import Optional, Tuple

from supabase import Client, create_client
from marcheurs.config import settings
from marcheurs.database.storage import BucketStorage, guess_content_type
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_SOURCE_DIR = Path("v1") / "diaporamaPHP"
FOLDER_PATTERN = re.compile(r"^(\d{4})[_-](\d{2})[_-](\d{2})[_-](.+)$")
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png"}
IMPORTED_DESCRIPTION = "Importé depuis l'ancien site"


@dataclass
class MigrationSummary:
    hikes_created: int = 0
    hikes_existing: int = 0
    photos_linked: int = 0
    photos_existing: int = 0
    photos_failed: int = 0
    skipped_folders: list = field(default_factory=list)


def parse_folder_name(name: str) -> Optional[Tuple[str, str]]:
    """(ISO date, title) from '2021_04_02_Tour_du_lac', None for other names."""
    match = FOLDER_PATTERN.match(name)
    if not match:
        return None
    year, month, day, raw_title = match.groups()
    try:
        hike_date = date(int(year), int(month), int(day))
    except ValueError:
        return None
    title = re.sub(r"[_-]", " ", raw_title).strip()
    return hike_date.isoformat(), title


def find_admin_id(supabase: Client) -> Optional[str]:
    """First admin profile, credited as author of the imported content."""
    try:
        result = supabase.table("profiles")\
            .select("id")\
            .eq("role", "admin")\
            .limit(1)\
            .execute()
    except Exception as e:
        logger.warning(f"Could not look up an admin profile: {e}")
        return None
    return result.data[0]["id"] if result.data else None


def ensure_bucket(supabase: Client, bucket_name: str):
    try:
        supabase.storage.get_bucket(bucket_name)
        logger.info(f"Bucket '{bucket_name}' exists.")
        return
    except Exception as e:
        if "not found" not in str(e).lower():
            logger.warning(f"Warning checking bucket: {e}")
            return
    logger.info(f"Creating storage bucket: {bucket_name}")
    supabase.storage.create_bucket(bucket_name, options={"public": True})


def find_or_create_hike(supabase: Client, hike_date: str, title: str, admin_id: Optional[str],
                        summary: MigrationSummary) -> Optional[str]:
    existing = supabase.table("hikes")\
        .select("id")\
        .eq("date", hike_date)\
        .eq("title", title)\
        .limit(1)\
        .execute()
    if existing.data:
        summary.hikes_existing += 1
        logger.info(f"Hike already exists (ID: {existing.data[0]['id']})")
        return existing.data[0]["id"]

    created = supabase.table("hikes").insert({
        "title": title,
        "date": hike_date,
        "description": IMPORTED_DESCRIPTION,
        "status": "published",
        "created_by": admin_id,
    }).execute()
    if not created.data:
        return None
    summary.hikes_created += 1
    logger.info(f"Created new hike (ID: {created.data[0]['id']})")
    return created.data[0]["id"]


def migrate_photo(supabase: Client, storage: BucketStorage, hike_id: str, path: Path,
                  admin_id: Optional[str], summary: MigrationSummary):
    storage_path = f"{hike_id}/{path.name}"
    storage.upload_file(path.read_bytes(), storage_path, guess_content_type(path.name, "image/jpeg"), upsert=True)

    existing = supabase.table("photos")\
        .select("id")\
        .eq("hike_id", hike_id)\
        .eq("storage_path", storage_path)\
        .limit(1)\
        .execute()
    if existing.data:
        summary.photos_existing += 1
        return

    supabase.table("photos").insert({
        "hike_id": hike_id,
        "user_id": admin_id,
        "storage_path": storage_path,
        "caption": path.name,
    }).execute()
    summary.photos_linked += 1


def migrate_folder(supabase: Client, storage: BucketStorage, folder: Path, admin_id: Optional[str],
                   summary: MigrationSummary):
    parsed = parse_folder_name(folder.name)
    if parsed is None:
        logger.info(f"Skipping invalid folder format: {folder.name}")
        summary.skipped_folders.append(folder.name)
        return
    hike_date, title = parsed
    logger.info(f"Processing hike: [{hike_date}] {title}")

    try:
        hike_id = find_or_create_hike(supabase, hike_date, title, admin_id, summary)
    except Exception as e:
        logger.error(f"Failed to create hike {title}: {e}")
        return
    if not hike_id:
        return

    for path in sorted(folder.iterdir()):
        if not path.is_file() or path.suffix.lower() not in IMAGE_EXTENSIONS:
            continue
        try:
            migrate_photo(supabase, storage, hike_id, path, admin_id, summary)
        except Exception as e:
            summary.photos_failed += 1
            logger.error(f"Photo {path.name} of {title} failed: {e}")


def migrate(supabase: Client, source_dir: Path, bucket_name: str) -> MigrationSummary:
    """Walk SOURCE_DIR and import every dated folder; returns counts."""
    summary = MigrationSummary()
    admin_id = find_admin_id(supabase)
    if admin_id:
        logger.info(f"Attributing content to admin ID: {admin_id}")
    else:
        logger.warning("No admin user found or accessible. Content will have a null created_by.")

    ensure_bucket(supabase, bucket_name)
    storage = BucketStorage(supabase, bucket_name)
    for folder in sorted(p for p in source_dir.iterdir() if p.is_dir()):
        migrate_folder(supabase, storage, folder, admin_id, summary)
    return summary


def get_migration_client() -> Client:
    if not settings.supabase_url:
        raise ValueError("SUPABASE_URL must be configured")
    key = settings.supabase_service_role_key or settings.supabase_key
    if not key:
        raise ValueError("SUPABASE_SERVICE_ROLE_KEY or SUPABASE_KEY must be configured")
    if not settings.supabase_service_role_key:
        logger.warning("Running with the anon key. Row Level Security may block the migration.")
    return create_client(settings.supabase_url, key)


def main(argv=None):
    """Main function to run the legacy migration"""
    parser = argparse.ArgumentParser(description="Import the legacy photo gallery")
    parser.add_argument("source_dir", nargs="?", default=str(DEFAULT_SOURCE_DIR))
    parser.add_argument("--bucket", default=settings.photos_bucket)
    args = parser.parse_args(argv)

    source_dir = Path(args.source_dir)
    if not source_dir.is_dir():
        logger.error(f"Directory not found: {source_dir}")
        sys.exit(1)

    try:
        logger.info(f"Starting migration from {source_dir}...")
        summary = migrate(get_migration_client(), source_dir, args.bucket)
        logger.info(f"Migration complete: {asdict(summary)}")
    except Exception as e:
        logger.error(f"Error during migration: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
