#!/usr/bin/env python3
"""
Prune the MP3 store down to its size budget.

The service evicts at most a few files per download; after lowering the
budget, or when files were copied in by hand, this brings the directory
back under budget in one go. Also clears leftovers of interrupted downloads
from the staging directory.

Usage:
    python scripts/prune_store.py [-c config.json] [-d files] [-m 200] [--dry-run]
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import configure_settings  # noqa: E402
from core.errors import ConfigError, StoreIOError  # noqa: E402
from core.logger import configure_script_logging, logger  # noqa: E402
from infrastructure.filesystem.artifact_store import FilesystemArtifactStore  # noqa: E402
from services.eviction import EvictionPolicy  # noqa: E402

# Safety cap on removals in a single run
DEFAULT_MAX_EVICTIONS = 10000


def plan_evictions(store: FilesystemArtifactStore, budget_bytes: int) -> list:
    """Artifacts that would be removed, oldest first, without touching disk."""
    total = store.total_size()
    artifacts = sorted(store.list_artifacts(), key=lambda a: (a.modified_at, str(a.path)))

    planned = []
    for artifact in artifacts:
        if total <= budget_bytes:
            break
        planned.append(artifact)
        total -= artifact.size_bytes
    return planned


def clear_staging(store: FilesystemArtifactStore, dry_run: bool) -> int:
    """Remove files left in the staging directory by interrupted downloads."""
    if not store.staging_dir.is_dir():
        return 0

    removed = 0
    for leftover in store.staging_dir.iterdir():
        if not leftover.is_file():
            continue
        logger.info(f"{'Would remove' if dry_run else 'Removing'} staged file: {leftover}")
        if not dry_run:
            try:
                leftover.unlink()
            except OSError as e:
                logger.error(f"Failed to remove {leftover}: {e}")
                continue
        removed += 1
    return removed


def main() -> int:
    parser = argparse.ArgumentParser(description="Prune the MP3 store to its size budget")
    parser.add_argument("-c", "--config", default=None, help="path to JSON config file")
    parser.add_argument("-d", "--files-dir", default=None, help="store directory")
    parser.add_argument("-m", "--max-mb", type=int, default=None, help="budget in MB")
    parser.add_argument(
        "--max-evictions",
        type=int,
        default=DEFAULT_MAX_EVICTIONS,
        help=f"maximum files to remove (default: {DEFAULT_MAX_EVICTIONS})",
    )
    parser.add_argument(
        "--keep-staging", action="store_true", help="do not clear the staging directory"
    )
    parser.add_argument("--dry-run", action="store_true", help="only report what would be removed")
    args = parser.parse_args()

    try:
        settings = configure_settings(
            args.config, files_dir=args.files_dir, dir_size_max_mb=args.max_mb
        )
    except ConfigError as e:
        print(f"Error getting config: {e}", file=sys.stderr)
        return 1

    configure_script_logging(level=settings.script_log_level)

    store = FilesystemArtifactStore(Path(settings.files_dir), extension=settings.audio_format)
    budget = settings.budget_bytes

    try:
        before = store.total_size()
        logger.info(f"Store {store.root}: {before} bytes, budget {budget} bytes")

        if not args.keep_staging:
            clear_staging(store, args.dry_run)

        if args.dry_run:
            planned = plan_evictions(store, budget)
            for artifact in planned:
                logger.info(f"Would remove {artifact.path} ({artifact.size_bytes} bytes)")
            logger.info(f"Dry run: {len(planned)} file(s) would be removed")
            return 0
    except StoreIOError as e:
        logger.error(f"Cannot scan store: {e}")
        return 1

    policy = EvictionPolicy(store, budget_bytes=budget, max_evictions=args.max_evictions)
    evicted = policy.maybe_evict()

    try:
        after = store.total_size()
    except StoreIOError as e:
        logger.error(f"Cannot scan store: {e}")
        return 1

    logger.success(f"Removed {len(evicted)} file(s): {before} -> {after} bytes")
    return 0 if after <= budget else 1


if __name__ == "__main__":
    sys.exit(main())
