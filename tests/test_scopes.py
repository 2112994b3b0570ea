"""
Tests for Scopes collections and authorization queries.

Verifies:
- resolve() returns the most general covering grant
- can() is existential, >= is universal
- merge() is a de-duplicated union
"""

import pytest

from scopetree import InvalidArgumentError, Scope, Scopes


class TestConstruction:
    """Tests for building collections."""

    def test_deduplicates_by_string_form(self):
        scopes = Scopes(["a.b", Scope.wrap("a.b"), "a.c"])
        assert len(scopes) == 2

    def test_most_general_first(self):
        scopes = Scopes(["a.b.c", "a.b", "a", "a.*"])
        assert scopes.to_list() == ["a", "a.*", "a.b", "a.b.c"]

    def test_single_string(self):
        assert Scopes("a.b").to_list() == ["a.b"]

    def test_nested_iterables_flattened(self):
        assert set(Scopes([["a"], ("b", ["c"])]).to_list()) == {"a", "b", "c"}

    def test_wrap_passes_scopes_through(self):
        scopes = Scopes(["a"])
        assert Scopes.wrap(scopes) is scopes

    def test_rendering(self):
        scopes = Scopes(["a.b", "a"])
        assert str(scopes) == "a, a.b"
        assert "a.b" in scopes
        assert "a.c" not in scopes
        assert [str(s) for s in scopes] == ["a", "a.b"]


class TestResolve:
    """Tests for finding the grant that authorizes a request."""

    def test_most_general_match(self):
        scopes = Scopes(["a.b.c", "a.b", "a"])
        assert scopes.resolve("a.b.c.d") == Scope.wrap("a")

    def test_wildcard_match(self):
        scopes = Scopes(["accounts.*.read"])
        assert str(scopes.resolve("accounts.7.read")) == "accounts.*.read"

    def test_no_match_returns_none(self):
        scopes = Scopes(["accounts.1"])
        assert scopes.resolve("accounts.2.read") is None

    def test_ties_keep_insertion_order(self):
        """Equally general grants resolve in the order they were given."""
        assert str(Scopes(["a.*", "*.b"]).resolve("a.b")) == "a.*"
        assert str(Scopes(["*.b", "a.*"]).resolve("a.b")) == "*.b"


class TestCan:
    """Tests for the existential check."""

    def test_one_covered_request_is_enough(self):
        assert Scopes(["a.b"]).can(["a.b.c", "x.y"])

    def test_nothing_covered(self):
        assert not Scopes(["a.b"]).can(["a.c", "x.y"])

    def test_accepts_single_scope(self):
        assert Scopes(["a"]).can("a.1")
        assert Scopes(["a"]).can(Scope.wrap("a.1"))


class TestAggregateCoverage:
    """Tests for the universal >= check."""

    def test_single_grant_covers_all(self):
        assert Scopes(["a"]) >= Scopes(["a.1", "a.2"])

    def test_partial_cover_is_not_enough(self):
        assert not Scopes(["a.1"]) >= Scopes(["a.1", "a.2"])

    def test_split_grants_do_not_combine(self):
        """Each request covered by a different grant is still not aggregate coverage."""
        granted = Scopes(["a.1", "a.2"])
        requested = Scopes(["a.1", "a.2.read"])
        assert granted.can(requested)
        assert not granted >= requested

    def test_reverse_comparison(self):
        assert Scopes(["a.1", "a.2"]) <= Scopes(["a"])
        assert Scopes(["a"]) > Scopes(["a.1"])
        assert not Scopes(["a"]) > Scopes(["a"])

    def test_compares_with_lists(self):
        assert Scopes(["a"]) >= ["a.1", "a.2"]

    def test_equality_only_between_collections(self):
        assert Scopes(["a"]) == Scopes(["a"])
        assert Scopes(["a", "b"]) == Scopes(["b", "a"])
        assert Scopes(["a"]) != "a"
        assert Scopes(["a"]) != ["a"]

    def test_equal_collections_hash_alike(self):
        assert len({Scopes(["a", "b"]), Scopes(["b", "a"])}) == 1
        assert "a" not in {Scopes(["a"])}


class TestMerge:
    """Tests for set algebra."""

    def test_union(self):
        merged = Scopes(["a.1"]).merge(Scopes(["a.2", "a.1"]))
        assert set(merged.to_list()) == {"a.1", "a.2"}

    def test_commutative(self):
        a = Scopes(["a.1", "b"])
        b = Scopes(["c", "a.1.read"])
        assert a.merge(b) == b.merge(a)

    def test_idempotent(self):
        a = Scopes(["a.1", "b"])
        assert a.merge(a) == a
        assert len(a.merge(a)) == 2

    def test_returns_new_instance(self):
        a = Scopes(["a"])
        assert a.merge(Scopes(["b"])) is not a
        assert a.to_list() == ["a"]

    def test_rejects_non_scopes(self):
        with pytest.raises(InvalidArgumentError):
            Scopes(["a"]).merge(["b"])

    def test_rejects_bad_to_scopes(self):
        class Fake:
            def to_scopes(self):
                return ["b"]

        with pytest.raises(InvalidArgumentError):
            Scopes(["a"]).merge(Fake())


class TestPredicates:
    """Tests for any()/all() delegation."""

    def test_any(self):
        scopes = Scopes(["a.1", "b.*"])
        assert scopes.any(lambda s: s.wildcard_count > 0)
        assert not scopes.any(lambda s: len(s) > 2)
        assert not Scopes([]).any()

    def test_all(self):
        scopes = Scopes(["a.1", "b.2"])
        assert scopes.all(lambda s: len(s) == 2)
        assert not scopes.all(lambda s: str(s).startswith("a"))


class TestExpand:
    """Tests for substitution over a collection."""

    def test_expands_every_member(self):
        scopes = Scopes(["accounts.my-account", "shops.my-shop"])
        expanded = scopes.expand({"my-account": 1, "my-shop": 2})
        assert expanded == Scopes(["accounts.1", "shops.2"])
