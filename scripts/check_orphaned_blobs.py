"""
Orphaned photo blob check.

Deleting a gallery removes its blobs on a best-effort basis, and a failed
removal leaves objects in the bucket that no gallery references. This
script lists them and, with --delete, removes them in one batch.

Usage:
    python scripts/check_orphaned_blobs.py            # Report only
    python scripts/check_orphaned_blobs.py --delete   # Remove orphans
"""

from dotenv import load_dotenv
load_dotenv()

import os
import sys
import asyncio
import argparse
from typing import List

# Add repo root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import settings
from core.exceptions import AppException
from core.logging import setup_logging
from infrastructure import Backends, build_backends
from repositories import GalleriesRepository


async def find_orphaned_blobs(backends: Backends) -> List[str]:
    """Blob keys that no gallery photo points at."""
    galleries = await GalleriesRepository(backends.documents).list_all()
    referenced = {path for gallery in galleries for path in gallery.storage_paths}
    keys = await backends.blobs.list_keys()

    print(f"Galleries: {len(galleries)}, referenced photos: {len(referenced)}, blobs: {len(keys)}")
    return [key for key in keys if key not in referenced]


async def run(delete: bool) -> int:
    backends = build_backends(settings)
    orphans = await find_orphaned_blobs(backends)

    if not orphans:
        print("No orphaned blobs")
        return 0

    print(f"\nOrphaned blobs: {len(orphans)}")
    for key in orphans:
        print(f"  - {key}")

    if delete:
        await backends.blobs.remove(orphans)
        print(f"\nRemoved {len(orphans)} blobs")
    else:
        print("\nRun with --delete to remove them")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Find photo blobs no gallery references")
    parser.add_argument("--delete", action="store_true", help="Remove the orphaned blobs")
    args = parser.parse_args()

    setup_logging(level=settings.log_level)

    print("=" * 60)
    print(f"Orphaned blob check ({settings.effective_blob_backend}: {settings.photos_bucket})")
    print("=" * 60)

    try:
        return asyncio.run(run(args.delete))
    except AppException as e:
        print(f"ERROR: {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
