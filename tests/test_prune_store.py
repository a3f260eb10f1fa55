"""
Tests for the prune_store maintenance script helpers.
"""

import importlib.util
import os
from pathlib import Path

import pytest

from conftest import write_artifact

SCRIPT_PATH = Path(__file__).parent.parent / "scripts" / "prune_store.py"


@pytest.fixture(scope="module")
def prune_store():
    spec = importlib.util.spec_from_file_location("prune_store", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestPlanEvictions:
    """Tests for the dry-run plan"""

    def test_plans_oldest_until_under_budget(self, prune_store, store, store_dir):
        write_artifact(store_dir, "a.mp3", 100, 1000)
        write_artifact(store_dir, "b.mp3", 100, 2000)
        write_artifact(store_dir, "c.mp3", 100, 3000)

        planned = prune_store.plan_evictions(store, budget_bytes=150)

        assert [a.id for a in planned] == ["a", "b"]
        # Nothing is touched
        assert store.exists("a") and store.exists("b")

    def test_under_budget_plans_nothing(self, prune_store, store, store_dir):
        write_artifact(store_dir, "a.mp3", 100, 1000)
        assert prune_store.plan_evictions(store, budget_bytes=100) == []


class TestClearStaging:
    """Tests for staging cleanup"""

    def test_removes_leftovers(self, prune_store, store):
        store.staging_path("abc").with_suffix(".webm.part").write_bytes(b"partial")

        assert prune_store.clear_staging(store, dry_run=False) == 1
        assert list(store.staging_dir.iterdir()) == []

    def test_dry_run_keeps_files(self, prune_store, store):
        leftover = store.staging_path("abc")
        leftover.write_bytes(b"partial")

        assert prune_store.clear_staging(store, dry_run=True) == 1
        assert leftover.exists()

    def test_missing_staging_dir(self, prune_store, store):
        os.rmdir(store.staging_dir)
        assert prune_store.clear_staging(store, dry_run=False) == 0
