"""
Tests for the durable enum store.
"""

import pytest

from indexid.core.errors import PersistenceFailure
from indexid.core.handle import MAX_IDS
from indexid.store.enum_file import EnumStore, order_names, parse_names, split_lines


class TestLoad:
    def test_line_number_is_id(self, tmp_path):
        path = tmp_path / "indices.enum"
        path.write_text("alpha\nbeta\ngamma\n", encoding="utf-8")

        assert EnumStore(path).load() == {"alpha": 1, "beta": 2, "gamma": 3}

    def test_missing_trailing_newline(self, tmp_path):
        path = tmp_path / "indices.enum"
        path.write_text("alpha\nbeta", encoding="utf-8")

        assert EnumStore(path).load() == {"alpha": 1, "beta": 2}

    def test_missing_file_resets(self, tmp_path):
        store = EnumStore(tmp_path / "nested" / "indices.enum")

        assert store.load() == {}
        assert store.exists()

    @pytest.mark.parametrize("content", [
        b"alpha\n\xff\xfe\n",
        b"alpha\n\nbeta\n",
        b"alpha\nbeta\nalpha\n",
    ])
    def test_corrupt_file_resets(self, tmp_path, content):
        path = tmp_path / "indices.enum"
        path.write_bytes(content)

        assert EnumStore(path).load() == {}
        assert path.read_bytes() == b""

    def test_unwritable_location_does_not_raise(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")

        store = EnumStore(blocker / "indices.enum")
        assert store.load() == {}
        assert not store.exists()


class TestRewrite:
    def test_orders_by_id(self, tmp_path):
        store = EnumStore(tmp_path / "indices.enum")
        store.rewrite({"gamma": 3, "alpha": 1, "beta": 2})

        assert store.path.read_text(encoding="utf-8") == "alpha\nbeta\ngamma\n"

    def test_non_ascii_names(self, tmp_path):
        store = EnumStore(tmp_path / "indices.enum")
        store.rewrite({"índice": 1, "名前 x": 2})

        assert store.load() == {"índice": 1, "名前 x": 2}

    def test_gap_in_ids(self, tmp_path):
        store = EnumStore(tmp_path / "indices.enum")

        with pytest.raises(PersistenceFailure):
            store.rewrite({"alpha": 1, "gamma": 3})
        assert not store.exists()

    def test_write_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")

        with pytest.raises(PersistenceFailure) as exc_info:
            EnumStore(blocker / "indices.enum").rewrite({"alpha": 1})
        assert isinstance(exc_info.value.__cause__, OSError)


class TestHelpers:
    def test_split_lines(self):
        assert split_lines("") == []
        assert split_lines("a\nb\n") == ["a", "b"]
        assert split_lines("a\x0bb\n") == ["a\x0bb"]

    def test_parse_names_capacity(self):
        with pytest.raises(ValueError):
            parse_names([f"n{i}" for i in range(MAX_IDS + 1)])

    def test_order_names_duplicate_id(self):
        with pytest.raises(PersistenceFailure):
            order_names({"alpha": 1, "beta": 1})
