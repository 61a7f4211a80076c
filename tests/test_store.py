"""Tests for the callback-fed results store"""

import threading

from product_media.store import InMemoryJobStore, get_result, record_result


class TestResultsStore:
    """Tests for record_result / get_result"""

    def test_unknown_job_is_not_found(self, store):
        """Test a job id that never received a callback has no result"""
        assert get_result(store, "never-seen") is None
        assert get_result(store, "") is None

    def test_record_then_get_returns_payload_with_timestamp(self, store):
        """Test the stored entry is the payload plus receivedAt"""
        payload = {"imageUrl": "https://cdn.example.com/i.png", "videoUrl": "https://cdn.example.com/v.mp4"}
        record_result(store, "job-1", payload)

        result = get_result(store, "job-1")
        assert "receivedAt" in result
        received_at = result.pop("receivedAt")
        assert result == payload
        assert received_at.endswith("+00:00")

    def test_second_callback_overwrites_first(self, store):
        """Test a repeated callback replaces the earlier result instead of merging"""
        record_result(store, "job-1", {"imageUrl": "first.png", "imagePrompt": "first prompt"})
        record_result(store, "job-1", {"videoUrl": "second.mp4"})

        result = get_result(store, "job-1")
        result.pop("receivedAt")
        assert result == {"videoUrl": "second.mp4"}
        assert len(store) == 1

    def test_payload_is_not_mutated(self, store):
        """Test the caller's dict does not gain a receivedAt key"""
        payload = {"imageUrl": "a.png"}
        record_result(store, "job-1", payload)
        assert payload == {"imageUrl": "a.png"}

    def test_jobs_are_isolated(self, store):
        """Test results for one job are not visible under another id"""
        record_result(store, "job-1", {"imageUrl": "a.png"})
        assert get_result(store, "job-2") is None


class TestInMemoryJobStore:
    """Tests for the JobStore interface on the in-memory implementation"""

    def test_delete(self):
        store = InMemoryJobStore()
        store.put("job-1", {"x": 1})
        assert store.delete("job-1") is True
        assert store.get("job-1") is None
        assert store.delete("job-1") is False

    def test_len_counts_entries(self):
        store = InMemoryJobStore()
        assert len(store) == 0
        store.put("a", {})
        store.put("b", {})
        store.put("a", {})
        assert len(store) == 2

    def test_concurrent_writers(self):
        """Test parallel callbacks for distinct jobs are all kept"""
        store = InMemoryJobStore()

        def write(i):
            record_result(store, f"job-{i}", {"n": i})

        threads = [threading.Thread(target=write, args=(i,)) for i in range(50)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 50
        assert store.get("job-7")["n"] == 7
