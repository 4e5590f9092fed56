"""
Tests for handles and owners.
"""

from indexid.core.handle import MAX_IDS, NO_OWNER, IndexId, Owner


class TestIndexId:
    def test_equality_by_id(self):
        assert IndexId("alpha", 1) == IndexId("renamed", 1)
        assert IndexId("alpha", 1) != IndexId("alpha", 2)
        assert IndexId("alpha", 1) != 1

    def test_hash_is_id(self):
        handle = IndexId("alpha", 7)

        assert hash(handle) == 7
        assert {handle: "x"}[IndexId("other", 7)] == "x"

    def test_int_and_str(self):
        handle = IndexId("alpha", 3)

        assert int(handle) == 3
        assert str(handle) == "alpha"
        assert repr(handle) == "IndexId('alpha', id=3)"


class TestOwner:
    def test_value_equality(self):
        assert Owner("plugin.a") == Owner("plugin.a")
        assert Owner("plugin.a") != Owner("plugin.b")
        assert Owner("plugin.a") != NO_OWNER

    def test_max_ids(self):
        assert MAX_IDS == 32767
