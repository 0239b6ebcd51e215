"""Unit tests for package models.

Tests for PackageType, Package and PackageCollection.
"""

import pytest
from brewsync.models.package import (
    PRIMARY_TYPES,
    Package,
    PackageCollection,
    PackageType,
    parse_package_id,
)


class TestPackageType:
    """Tests for PackageType enum."""

    def test_declaration_order(self) -> None:
        """Types are declared in Brewfile order."""
        assert [t.value for t in PackageType] == [
            "tap",
            "brew",
            "cask",
            "vscode",
            "cursor",
            "antigravity",
            "go",
            "mas",
        ]

    def test_primary_types(self) -> None:
        """Only Homebrew types are primary."""
        assert PRIMARY_TYPES == {PackageType.TAP, PackageType.BREW, PackageType.CASK}
        assert PackageType.CASK.is_primary
        assert not PackageType.MAS.is_primary

    def test_parse_is_case_insensitive(self) -> None:
        """parse accepts any case and surrounding whitespace."""
        assert PackageType.parse(" Cask ") is PackageType.CASK

    def test_parse_unknown_type(self) -> None:
        """parse lists the valid types on error."""
        with pytest.raises(ValueError, match="valid types: tap, brew"):
            PackageType.parse("npm")


class TestPackage:
    """Tests for Package dataclass."""

    def test_id(self) -> None:
        """ID is type:name."""
        assert Package(PackageType.BREW, "git").id == "brew:git"

    def test_empty_name_rejected(self) -> None:
        """Empty names raise ValueError."""
        with pytest.raises(ValueError, match="cannot be empty"):
            Package(PackageType.BREW, "")

    def test_non_enum_type_rejected(self) -> None:
        """Type must be a PackageType member."""
        with pytest.raises(ValueError, match="must be a PackageType"):
            Package("brew", "git")  # type: ignore[arg-type]

    def test_equality_ignores_metadata(self) -> None:
        """Packages with the same ID are equal regardless of description."""
        plain = Package(PackageType.BREW, "git")
        described = Package(PackageType.BREW, "git", description="VCS", options={"link": "true"})

        assert plain == described
        assert hash(plain) == hash(described)

    def test_same_name_different_type_differs(self) -> None:
        """brew:docker and cask:docker are distinct."""
        assert Package(PackageType.BREW, "docker") != Package(PackageType.CASK, "docker")

    def test_display_name_prefers_full_name(self) -> None:
        """display_name uses full_name when set."""
        app = Package(PackageType.MAS, "497799835", full_name="Xcode")
        assert app.display_name == "Xcode"
        assert Package(PackageType.BREW, "git").display_name == "git"

    def test_with_option_returns_copy(self) -> None:
        """with_option leaves the original untouched."""
        original = Package(PackageType.MAS, "497799835")
        updated = original.with_option("id", "497799835")

        assert updated.options == {"id": "497799835"}
        assert original.options == {}

    def test_with_description(self) -> None:
        """with_description replaces only the description."""
        package = Package(PackageType.BREW, "jq").with_description("JSON processor")
        assert package.description == "JSON processor"
        assert package.name == "jq"

    def test_to_dict(self) -> None:
        """to_dict carries identity and metadata."""
        package = Package(
            PackageType.MAS, "497799835", full_name="Xcode", options={"id": "497799835"}
        )
        assert package.to_dict() == {
            "id": "mas:497799835",
            "type": "mas",
            "name": "497799835",
            "full_name": "Xcode",
            "description": None,
            "options": {"id": "497799835"},
        }


class TestParsePackageId:
    """Tests for parse_package_id function."""

    def test_valid_id(self) -> None:
        """type:name is split on the first colon."""
        package = parse_package_id("go:golang.org/x/tools/gopls")
        assert package.type is PackageType.GO
        assert package.name == "golang.org/x/tools/gopls"

    @pytest.mark.parametrize("value", ["git", "brew:", ":git"])
    def test_malformed_ids(self, value: str) -> None:
        """Missing type or name raises ValueError."""
        with pytest.raises(ValueError):
            parse_package_id(value)

    def test_unknown_type(self) -> None:
        """Unknown type raises ValueError."""
        with pytest.raises(ValueError, match="Invalid package type"):
            parse_package_id("npm:left-pad")


class TestPackageCollection:
    """Tests for PackageCollection."""

    @pytest.fixture
    def collection(self) -> PackageCollection:
        """Create a mixed collection."""
        return PackageCollection(
            [
                Package(PackageType.BREW, "git"),
                Package(PackageType.CASK, "firefox"),
                Package(PackageType.BREW, "jq"),
                Package(PackageType.TAP, "oven-sh/bun"),
            ]
        )

    def test_constructor_dedupes(self) -> None:
        """Duplicate IDs keep the first occurrence."""
        collection = PackageCollection(
            [
                Package(PackageType.BREW, "git", description="first"),
                Package(PackageType.BREW, "git", description="second"),
            ]
        )
        assert len(collection) == 1
        assert collection[0].description == "first"

    def test_contains_package_and_id(self, collection: PackageCollection) -> None:
        """Membership works with Package and ID string."""
        assert Package(PackageType.BREW, "git") in collection
        assert "cask:firefox" in collection
        assert "brew:firefox" not in collection
        assert 42 not in collection

    def test_add_unique_keeps_existing(self, collection: PackageCollection) -> None:
        """add_unique never replaces existing entries."""
        collection.add_unique(
            Package(PackageType.BREW, "git", description="new"),
            Package(PackageType.BREW, "wget"),
        )
        assert len(collection) == 5
        assert collection.get("brew:git").description is None  # type: ignore[union-attr]
        assert collection[-1].id == "brew:wget"

    def test_get_by_id(self) -> None:
        """get returns the stored first occurrence, or None."""
        first = Package(PackageType.BREW, "git", description="first")
        collection = PackageCollection([first, Package(PackageType.BREW, "git")])
        collection.add_unique(Package(PackageType.BREW, "git", description="later"))

        assert collection.get("brew:git") is first
        assert collection.get("cask:git") is None

    def test_add_unique_idempotent(self) -> None:
        """Adding the same items twice equals adding them once."""
        items = [Package(PackageType.BREW, "git"), Package(PackageType.CASK, "arc")]
        once = PackageCollection([Package(PackageType.TAP, "a/b")]).add_unique(*items)
        twice = (
            PackageCollection([Package(PackageType.TAP, "a/b")])
            .add_unique(*items)
            .add_unique(*items)
        )

        assert twice == once
        assert [p.id for p in twice] == ["tap:a/b", "brew:git", "cask:arc"]

    def test_merge_unique_first_source_wins(self) -> None:
        """merge_unique keeps metadata from the first collection."""
        first = PackageCollection([Package(PackageType.BREW, "git", description="from A")])
        second = PackageCollection(
            [
                Package(PackageType.BREW, "git", description="from B"),
                Package(PackageType.BREW, "jq"),
            ]
        )

        merged = first.merge_unique(second)

        assert merged is first
        assert merged.ids() == {"brew:git", "brew:jq"}
        assert merged.get("brew:git").description == "from A"  # type: ignore[union-attr]

    def test_by_type_preserves_order(self, collection: PackageCollection) -> None:
        """Groups keep insertion order."""
        groups = collection.by_type()
        assert groups[PackageType.BREW].names() == ["git", "jq"]
        assert list(groups) == [PackageType.BREW, PackageType.CASK, PackageType.TAP]

    def test_filter_and_exclude(self, collection: PackageCollection) -> None:
        """filter keeps and exclude drops the given types."""
        assert collection.filter(PackageType.BREW).names() == ["git", "jq"]
        assert collection.exclude(PackageType.BREW, PackageType.TAP).names() == ["firefox"]

    def test_count_by_type(self, collection: PackageCollection) -> None:
        """Counts are keyed by type value."""
        assert collection.count_by_type() == {"brew": 2, "cask": 1, "tap": 1}

    def test_slice_returns_collection(self, collection: PackageCollection) -> None:
        """Slicing yields a PackageCollection."""
        head = collection[:2]
        assert isinstance(head, PackageCollection)
        assert head.names() == ["git", "firefox"]

    def test_equality_is_ordered(self) -> None:
        """Collections compare by ordered IDs."""
        a = PackageCollection([Package(PackageType.BREW, "a"), Package(PackageType.BREW, "b")])
        b = PackageCollection([Package(PackageType.BREW, "b"), Package(PackageType.BREW, "a")])
        assert a != b
        assert a == PackageCollection(list(a))

    def test_get_missing(self, collection: PackageCollection) -> None:
        """get returns None for unknown IDs."""
        assert collection.get("brew:nope") is None
