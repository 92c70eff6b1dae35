"""Tests for detecting declared but unused overrides."""

from npm_overrides_audit.models import OverrideDeclaration, OverrideUsage, PathSegment
from npm_overrides_audit.unused import find_unused


def usage(name, version="1.0.0"):
    return OverrideUsage.from_chains(
        name=name, version=version, chains=[(PathSegment(f"{name}@{version}"),)]
    )


class TestFindUnused:
    """Test the name-based set difference"""

    def test_unused_trim_is_reported_with_declared_version(self):
        declared = [OverrideDeclaration("send", "0.19.1"), OverrideDeclaration("trim", "0.0.3")]

        unused = find_unused(declared, [usage("send", "0.19.1")])

        assert [u.to_dict() for u in unused] == [{"name": "trim", "version": "0.0.3"}]

    def test_all_found_means_nothing_unused(self):
        declared = [OverrideDeclaration("a", "1"), OverrideDeclaration("b", "2")]

        assert find_unused(declared, [usage("b"), usage("a"), usage("extra")]) == []

    def test_matches_by_name_regardless_of_version(self):
        """A usage at a different version still counts"""
        declared = [OverrideDeclaration("send", "^0.19.0")]

        assert find_unused(declared, [usage("send", "0.19.1")]) == []

    def test_declaration_order_is_preserved(self):
        declared = [OverrideDeclaration(n, "1") for n in ["zeta", "alpha", "mid"]]

        assert [u.name for u in find_unused(declared, [])] == ["zeta", "alpha", "mid"]

    def test_set_difference_property(self):
        """The result is exactly declared minus found"""
        declared_names = ["a", "b", "c", "d", "e"]
        found_names = ["b", "d", "x"]
        declared = [OverrideDeclaration(n, "1") for n in declared_names]

        unused = find_unused(declared, [usage(n) for n in found_names])

        assert {u.name for u in unused} == set(declared_names) - set(found_names)

    def test_selector_key_matches_its_target(self):
        declared = [OverrideDeclaration("parent>child@1", "1.2.3", source="pnpm.overrides")]

        assert find_unused(declared, [usage("child")]) == []

    def test_alias_matches_declared_name(self):
        declared = [OverrideDeclaration("rollup", "npm:@rollup/wasm-node@^4.22.5")]

        assert find_unused(declared, [usage("rollup", "4.22.5")]) == []

    def test_range_key_matches_its_package(self):
        """The ">" of a version range is not a selector separator"""
        declared = [OverrideDeclaration("foo@>=1.0.0", "1.2.3")]

        assert find_unused(declared, [usage("foo", "1.2.3")]) == []
