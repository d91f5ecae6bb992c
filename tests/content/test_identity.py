# ABOUTME: Tests for slugs, the identity map and relation resolution
# ABOUTME: Validates slug rules, share paths and order-preserving ref resolution

import re

import pytest
from factories import page, rich_text_prop

from portfolio_sync.content.identity import (
    EntityKind,
    IdentityMap,
    build_identity_map,
    page_slug,
    slugify,
)


class TestSlugify:
    """Test slug generation."""

    @pytest.mark.parametrize(
        "title,expected",
        [
            ("Hello, World!", "hello-world"),
            ("  Leading and trailing  ", "leading-and-trailing"),
            ("C++ & Rust", "c-rust"),
            ("Café Déjà Vu", "caf-d-j-vu"),
            ("---", ""),
            ("", ""),
        ],
    )
    def test_slugify(self, title, expected):
        """Test slugs against representative titles."""
        assert slugify(title) == expected

    @pytest.mark.parametrize(
        "title",
        ["Machine Learning @ Scale (2024)", "--a--b--", "ÜBER_cool 42", "   ", "🚀 Launch!"],
    )
    def test_idempotent_and_well_formed(self, title):
        """Test slugifying a slug changes nothing and the shape is hyphen-separated alphanumerics."""
        slug = slugify(title)
        assert slugify(slug) == slug
        assert slug == "" or re.fullmatch(r"[a-z0-9]+(-[a-z0-9]+)*", slug)


class TestPageSlug:
    """Test slug selection from a page record."""

    def test_explicit_slug_wins(self):
        """Test the Slug property takes precedence and is normalized."""
        assert page_slug(page("p-1", "Some Title", Slug=rich_text_prop("Custom Slug"))) == "custom-slug"

    def test_falls_back_to_title(self):
        """Test the title is used without a Slug property."""
        assert page_slug(page("p-1", "Some Title")) == "some-title"

    def test_falls_back_to_page_id(self):
        """Test an untitled page is addressed by its id."""
        assert page_slug(page("abc-123", "")) == "abc-123"


@pytest.fixture
def identities() -> IdentityMap:
    return build_identity_map(
        {
            EntityKind.ORGANIZATION: [page("org-1", "Acme Corp")],
            EntityKind.PROJECT: [page("proj-1", "Search Engine"), page("proj-2", "Compiler")],
            EntityKind.SKILL: [],
        }
    )


class TestIdentityMap:
    """Test the per-run identity snapshot."""

    def test_entries(self, identities):
        """Test every fetched page is indexed once with its kind."""
        assert len(identities) == 3
        assert identities["org-1"].kind is EntityKind.ORGANIZATION
        assert identities["proj-2"].share_path == "/projects/compiler"

    def test_read_only(self, identities):
        """Test the map cannot be mutated after construction."""
        with pytest.raises(TypeError):
            identities["new"] = identities["org-1"]

    def test_resolve(self, identities):
        """Test a known id resolves into a denormalized ref."""
        ref = identities.resolve("org-1")
        assert ref.to_json_dict() == {
            "id": "org-1",
            "slug": "acme-corp",
            "title": "Acme Corp",
            "sharePath": "/organizations/acme-corp",
        }

    def test_resolve_refs_keeps_order_and_drops_unknown(self, identities):
        """Test resolved refs are an ordered subsequence of the input ids."""
        refs = identities.resolve_refs(["proj-2", "missing", "org-1", "proj-1"])
        assert [ref.id for ref in refs] == ["proj-2", "org-1", "proj-1"]

    def test_resolve_unknown(self, identities):
        """Test unknown ids resolve to nothing."""
        assert identities.resolve("missing") is None
        assert identities.resolve_refs([]) == []


class TestEntityKind:
    """Test share path construction."""

    @pytest.mark.parametrize(
        "kind,expected",
        [
            (EntityKind.ORGANIZATION, "/organizations/x"),
            (EntityKind.INVOLVEMENT, "/involvements/x"),
            (EntityKind.PROJECT, "/projects/x"),
            (EntityKind.SKILL, "/skills/x"),
        ],
    )
    def test_share_path(self, kind, expected):
        """Test every kind builds /<kind>s/<slug>."""
        assert kind.share_path("x") == expected
