"""Unit tests for Repository: Id allocation, guarded writes and reads."""
import json
from unittest.mock import patch

import pytest

from recordstore.exceptions import PersistenceError
from recordstore.repository import Repository, UpdateResult, next_id
from recordstore.storage import LoadStatus


def stored(repo):
    """Records as currently written in the repository's store file."""
    return json.loads(repo.store.path.read_text(encoding="utf-8"))


class TestNextId:
    """Tests for next_id."""

    def test_empty_collection(self):
        assert next_id([]) == 1

    def test_max_plus_one(self):
        assert next_id([{"Id": 3}, {"Id": 7}, {"Id": 2}]) == 8

    def test_float_ids_count_towards_max(self):
        assert next_id([{"Id": 1}, {"Id": 4.0}]) == 5
        assert next_id([{"Id": True}, {"Id": "9"}]) == 1

    def test_removed_max_is_reused(self, repo):
        """Removing the highest Id lets the next add reuse it."""
        repo.add({"Name": "a"})
        second = repo.add({"Name": "b"})
        repo.remove(second["Id"])
        assert repo.add({"Name": "c"})["Id"] == second["Id"]


class TestAdd:
    """Tests for Repository.add."""

    def test_assigns_increasing_ids(self, repo):
        ids = [repo.add({"Name": name})["Id"] for name in ("a", "b", "c", "d")]
        assert ids == [1, 2, 3, 4]

    def test_persists_and_returns_stored_record(self, repo):
        record = repo.add({"Name": "Alice", "Rank": "3"})
        assert record == {"Name": "Alice", "Rank": "3", "Id": 1}
        assert stored(repo) == [record]

    def test_client_id_is_ignored(self, repo):
        repo.add({"Name": "a"})
        assert repo.add({"Id": 99, "Name": "b"})["Id"] == 2

    def test_caller_mapping_is_not_modified(self, repo):
        candidate = {"Name": "a"}
        repo.add(candidate)
        assert candidate == {"Name": "a"}

    def test_invalid_returns_none(self, repo):
        assert repo.add({"Name": ""}) is None
        assert repo.add({"Rank": "1"}) is None
        assert repo.objects() == []
        assert not repo.store.path.exists()

    def test_key_conflict(self, repo):
        """A taken key value yields a flagged candidate and no insert."""
        repo.add({"Name": "Alice"})
        before = stored(repo)

        result = repo.add({"Name": "Alice", "Rank": "2"})

        assert result["conflict"] is True
        assert "Id" not in result
        assert len(repo.objects()) == 1
        assert stored(repo) == before

    def test_duplicates_allowed_without_key(self, note_repo):
        note_repo.add({"Name": "same"})
        assert note_repo.add({"Name": "same"})["Id"] == 2

    def test_write_failure_returns_none_and_rolls_back(self, repo):
        repo.add({"Name": "a"})
        with patch.object(repo.store, "persist", side_effect=PersistenceError(repo.store.path, OSError("disk full"))):
            assert repo.add({"Name": "b"}) is None
        assert [r["Name"] for r in repo.objects()] == ["a"]


class TestUpdate:
    """Tests for Repository.update."""

    @pytest.fixture
    def filled(self, repo):
        repo.add({"Name": "Alice", "Rank": "1"})
        repo.add({"Name": "Bob", "Rank": "2"})
        return repo

    def test_ok_replaces_in_place(self, filled):
        assert filled.update({"Id": 1, "Name": "Alicia", "Rank": "5"}) is UpdateResult.OK
        assert filled.objects()[0] == {"Id": 1, "Name": "Alicia", "Rank": "5"}
        assert stored(filled)[0]["Name"] == "Alicia"

    def test_own_key_value_is_not_a_conflict(self, filled):
        assert filled.update({"Id": 1, "Name": "Alice", "Rank": "9"}) is UpdateResult.OK

    def test_conflict_with_other_record(self, filled):
        assert filled.update({"Id": 1, "Name": "Bob"}) is UpdateResult.CONFLICT
        assert filled.get(1)["Name"] == "Alice"

    def test_not_found(self, filled):
        assert filled.update({"Id": 42, "Name": "Zed"}) is UpdateResult.NOT_FOUND

    def test_invalid_checked_first(self, filled):
        """Invalid wins over both conflict and not found."""
        assert filled.update({"Id": 42, "Name": ""}) is UpdateResult.INVALID
        assert filled.update({"Id": 1, "Name": 123}) is UpdateResult.INVALID

    def test_conflict_checked_before_not_found(self, filled):
        assert filled.update({"Id": 42, "Name": "Bob"}) is UpdateResult.CONFLICT

    def test_float_id_keeps_stored_int_id(self, filled):
        """An Id sent as 1.0 updates record 1 without changing its Id type."""
        assert filled.update({"Id": 1.0, "Name": "Alicia"}) is UpdateResult.OK
        assert filled.objects()[0]["Id"] == 1
        assert isinstance(filled.objects()[0]["Id"], int)
        assert isinstance(stored(filled)[0]["Id"], int)

        added = filled.add({"Name": "Carol"})
        ids = [r["Id"] for r in filled.objects()]
        assert added["Id"] == 3
        assert len(set(ids)) == len(ids)

    def test_write_failure_raises_and_rolls_back(self, filled):
        with patch.object(filled.store, "persist", side_effect=PersistenceError(filled.store.path, OSError("disk full"))):
            with pytest.raises(PersistenceError):
                filled.update({"Id": 1, "Name": "Alicia"})
        assert filled.get(1)["Name"] == "Alice"


class TestRemove:
    """Tests for Repository.remove and remove_by_index."""

    def test_remove_existing(self, repo):
        repo.add({"Name": "a"})
        repo.add({"Name": "b"})
        assert repo.remove(1) is True
        assert [r["Id"] for r in repo.objects()] == [2]
        assert stored(repo) == repo.objects()

    def test_remove_missing_does_not_write(self, repo):
        repo.add({"Name": "a"})
        with patch.object(repo.store, "persist") as persist:
            assert repo.remove(5) is False
        persist.assert_not_called()
        assert len(repo.objects()) == 1

    def test_remove_by_index_writes_once(self, repo):
        for name in ("a", "b", "c", "d"):
            repo.add({"Name": name})
        with patch.object(repo.store, "persist", wraps=repo.store.persist) as persist:
            repo.remove_by_index([0, 2, 2])
        assert persist.call_count == 1
        assert [r["Name"] for r in repo.objects()] == ["b", "d"]
        assert stored(repo) == repo.objects()

    def test_remove_by_index_empty_is_noop(self, repo):
        repo.add({"Name": "a"})
        with patch.object(repo.store, "persist") as persist:
            repo.remove_by_index([])
            repo.remove_by_index([10])
        persist.assert_not_called()
        assert len(repo.objects()) == 1


class TestReads:
    """Tests for get_all, get and find_by_field."""

    @pytest.fixture
    def filled(self, repo):
        repo.add({"Name": "Alice", "Rank": "10"})
        repo.add({"Name": "bob", "Rank": "9"})
        return repo

    def test_get_all_without_params(self, filled):
        assert [r["Id"] for r in filled.get_all()] == [1, 2]

    def test_get_all_with_params(self, filled):
        assert filled.get_all({"Name": "b*", "sort": "Name"}) == [{"Name": "bob", "Rank": "9", "Id": 2}]
        assert [r["Id"] for r in filled.get_all({"sort": "Id,desc"})] == [2, 1]
        assert [r["Id"] for r in filled.get_all({"sort": "Rank"})] == [2, 1]

    def test_reads_do_not_mutate_collection(self, filled):
        result = filled.get_all({"sort": "Id,desc"})
        result[0]["Name"] = "changed"
        assert [r["Id"] for r in filled.objects()] == [1, 2]
        assert filled.get(2)["Name"] == "bob"

    def test_get(self, filled):
        assert filled.get(1)["Name"] == "Alice"
        assert filled.get(3) is None

    def test_find_by_field(self, filled):
        assert filled.find_by_field("Name", "bob")["Id"] == 2
        assert filled.find_by_field("Name", "BOB") is None
        assert filled.find_by_field("Name", "bob", excluded_id=2) is None
        assert filled.find_by_field("", "bob") is None

    def test_enrichment_applies_to_reads(self, filled):
        filled.set_enrichment(lambda r: {**r, "Initial": r["Name"][0].upper()})
        assert filled.get(2)["Initial"] == "B"
        assert [r["Initial"] for r in filled.get_all()] == ["A", "B"]
        assert "Initial" not in filled.objects()[0]

    def test_enrichment_runs_before_filtering(self, tmp_path, person_model):
        repo = Repository(person_model, data_root=tmp_path, enrichment=lambda r: {**r, "Rank": r["Name"]})
        repo.add({"Name": "Alice"})
        repo.add({"Name": "bob"})
        assert [r["Id"] for r in repo.get_all({"Rank": "a*"})] == [1]


class TestPersistenceLifecycle:
    """Loading, reloading and corrupt stores."""

    def test_round_trip_through_new_instance(self, tmp_path, person_model):
        first = Repository(person_model, data_root=tmp_path)
        first.add({"Name": "Alice", "Rank": "1"})
        first.add({"Name": "bob"})

        second = Repository(person_model, data_root=tmp_path)
        assert second.objects() == first.objects()
        assert second.load_result.status is LoadStatus.LOADED

    def test_store_is_loaded_once(self, repo):
        with patch.object(repo.store, "load", wraps=repo.store.load) as load:
            repo.objects()
            repo.get_all()
            repo.get(1)
        assert load.call_count == 1

    def test_reload_reads_store_again(self, repo):
        repo.add({"Name": "a"})
        repo.store.path.write_text(json.dumps([{"Id": 5, "Name": "z"}]), encoding="utf-8")
        repo.reload()
        assert repo.get(5)["Name"] == "z"

    def test_corrupt_store_is_not_overwritten(self, repo):
        repo.store.path.write_text("not json", encoding="utf-8")

        assert repo.objects() == []
        assert repo.load_result.status is LoadStatus.CORRUPT
        assert repo.add({"Name": "a"}) is None
        assert repo.update({"Id": 1, "Name": "a"}) is UpdateResult.NOT_FOUND
        assert repo.remove(1) is False
        assert repo.store.path.read_text(encoding="utf-8") == "not json"

    def test_corrupt_store_is_retried(self, repo):
        repo.store.path.write_text("not json", encoding="utf-8")
        assert repo.get_all() == []

        repo.store.path.write_text(json.dumps([{"Id": 1, "Name": "a"}]), encoding="utf-8")
        assert repo.get(1) == {"Id": 1, "Name": "a"}
