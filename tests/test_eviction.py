"""
Unit tests for EvictionPolicy.
"""

from unittest.mock import MagicMock

import pytest

from conftest import MB, write_artifact
from core.errors import NoArtifactsError, StoreIOError
from services.eviction import EvictionPolicy


class TestSingleStepEviction:
    """Default policy: at most one removal per pass"""

    def test_under_budget_is_noop(self, store, store_dir):
        write_artifact(store_dir, "a.mp3", 100, 1000)

        assert EvictionPolicy(store, budget_bytes=200).maybe_evict() == []
        assert store.exists("a")

    def test_exactly_at_budget_does_not_evict(self, store, store_dir):
        write_artifact(store_dir, "a.mp3", 100, 1000)
        write_artifact(store_dir, "b.mp3", 100, 2000)

        assert EvictionPolicy(store, budget_bytes=200).maybe_evict() == []
        assert store.exists("a") and store.exists("b")

    def test_one_byte_over_evicts_oldest(self, store, store_dir):
        oldest = write_artifact(store_dir, "a.mp3", 100, 1000)
        write_artifact(store_dir, "b.mp3", 101, 2000)

        assert EvictionPolicy(store, budget_bytes=200).maybe_evict() == [oldest]
        assert not store.exists("a")
        assert store.exists("b")

    def test_removes_only_one_even_if_still_over(self, store, store_dir):
        write_artifact(store_dir, "a.mp3", 100, 1000)
        write_artifact(store_dir, "b.mp3", 100, 2000)
        write_artifact(store_dir, "c.mp3", 100, 3000)

        evicted = EvictionPolicy(store, budget_bytes=50).maybe_evict()

        assert len(evicted) == 1
        assert not store.exists("a")
        assert store.exists("b") and store.exists("c")

    def test_scenario_250mb_over_200mb_budget(self, store, store_dir):
        """a (oldest), b, c total 250MB against 200MB: only a goes."""
        write_artifact(store_dir, "a.mp3", 50 * MB, 1000)
        write_artifact(store_dir, "b.mp3", 100 * MB, 2000)
        write_artifact(store_dir, "c.mp3", 100 * MB, 3000)

        evicted = EvictionPolicy(store, budget_bytes=200 * MB).maybe_evict()

        assert [p.name for p in evicted] == ["a.mp3"]
        assert store.exists("b") and store.exists("c")
        assert store.total_size() == 200 * MB

    def test_non_artifact_files_count_toward_size_but_are_kept(self, store, store_dir):
        write_artifact(store_dir, "big.log", 500, 10)
        write_artifact(store_dir, "a.mp3", 10, 1000)

        evicted = EvictionPolicy(store, budget_bytes=100).maybe_evict()

        assert [p.name for p in evicted] == ["a.mp3"]
        assert (store_dir / "big.log").exists()


class TestBoundedEviction:
    """max_evictions > 1 keeps evicting while over budget"""

    def test_evicts_until_under_budget(self, store, store_dir):
        write_artifact(store_dir, "a.mp3", 100, 1000)
        write_artifact(store_dir, "b.mp3", 100, 2000)
        write_artifact(store_dir, "c.mp3", 100, 3000)

        evicted = EvictionPolicy(store, budget_bytes=150, max_evictions=10).maybe_evict()

        assert [p.name for p in evicted] == ["a.mp3", "b.mp3"]
        assert store.exists("c")

    def test_stops_at_cap(self, store, store_dir):
        for i, name in enumerate(["a", "b", "c", "d"]):
            write_artifact(store_dir, f"{name}.mp3", 100, 1000 + i)

        evicted = EvictionPolicy(store, budget_bytes=0, max_evictions=2).maybe_evict()

        assert [p.name for p in evicted] == ["a.mp3", "b.mp3"]

    def test_stops_when_no_artifacts_left(self, store, store_dir):
        write_artifact(store_dir, "big.log", 500, 10)
        write_artifact(store_dir, "a.mp3", 10, 1000)

        evicted = EvictionPolicy(store, budget_bytes=100, max_evictions=5).maybe_evict()

        assert [p.name for p in evicted] == ["a.mp3"]

    def test_invalid_cap(self, store):
        with pytest.raises(ValueError):
            EvictionPolicy(store, budget_bytes=1, max_evictions=0)


class TestErrorsAreSwallowed:
    """Store failures never escape an eviction pass"""

    def test_empty_store_over_budget(self, store, store_dir):
        write_artifact(store_dir, "big.log", 500, 10)
        assert EvictionPolicy(store, budget_bytes=100).maybe_evict() == []

    def test_size_scan_failure(self):
        mock_store = MagicMock()
        mock_store.total_size.side_effect = StoreIOError("permission denied")

        assert EvictionPolicy(mock_store, budget_bytes=1).maybe_evict() == []
        mock_store.remove.assert_not_called()

    def test_oldest_lookup_failure(self):
        mock_store = MagicMock()
        mock_store.total_size.return_value = 10
        mock_store.oldest.side_effect = NoArtifactsError("empty")

        assert EvictionPolicy(mock_store, budget_bytes=1).maybe_evict() == []

    def test_remove_failure(self, tmp_path):
        mock_store = MagicMock()
        mock_store.total_size.return_value = 10
        mock_store.oldest.return_value = tmp_path / "a.mp3"
        mock_store.remove.side_effect = StoreIOError("already deleted")

        assert EvictionPolicy(mock_store, budget_bytes=1).maybe_evict() == []

    def test_missing_root(self, tmp_path):
        from infrastructure.filesystem.artifact_store import FilesystemArtifactStore

        missing = FilesystemArtifactStore(tmp_path / "nope")
        assert EvictionPolicy(missing, budget_bytes=0).maybe_evict() == []
