"""Tests for git/reference.py: refspecs and database lookups per reference kind."""

from __future__ import annotations

import pytest

from sourcebinder.git.reference import (
    ALL_REFSPECS,
    Branch,
    DefaultBranch,
    Rev,
    Tag,
    ambiguity_candidates,
    is_full_oid,
    refspecs,
    resolution_query,
)

SHA1 = "a" * 40
SHA256 = "b" * 64


class TestIsFullOid:
    @pytest.mark.parametrize("rev", [SHA1, SHA256, SHA1.upper()])
    def test_full_ids(self, rev: str) -> None:
        assert is_full_oid(rev)

    @pytest.mark.parametrize("rev", ["abc1234", "main", "HEAD~1", "a" * 39, "g" * 40, ""])
    def test_not_full_ids(self, rev: str) -> None:
        assert not is_full_oid(rev)


class TestRefspecs:
    def test_branch_maps_to_remote_tracking_ref(self) -> None:
        assert refspecs(Branch("main")) == ["+refs/heads/main:refs/remotes/origin/main"]

    def test_tag_maps_to_local_tag_namespace(self) -> None:
        assert refspecs(Tag("v1.0")) == ["+refs/tags/v1.0:refs/tags/v1.0"]

    def test_tag_namespace_unreachable_from_branches(self) -> None:
        tag_dst = refspecs(Tag("v1.0"))[0].split(":")[1]
        branch_dst = refspecs(Branch("tags/v1.0"))[0].split(":")[1]
        assert tag_dst != branch_dst

    def test_full_oid_fetched_directly(self) -> None:
        assert refspecs(Rev(SHA1.upper())) == [f"+{SHA1}:refs/commit/{SHA1}"]

    def test_short_rev_fetches_everything(self) -> None:
        assert refspecs(Rev("abc1234")) == list(ALL_REFSPECS)

    def test_default_branch_follows_remote_head(self) -> None:
        assert refspecs(DefaultBranch()) == ["+HEAD:refs/remotes/origin/HEAD"]

    def test_all_refspecs_cover_heads_tags_and_head(self) -> None:
        joined = " ".join(ALL_REFSPECS)
        assert "refs/heads/*" in joined
        assert "refs/tags/*" in joined
        assert "+HEAD:" in joined


class TestResolutionQuery:
    def test_branch(self) -> None:
        assert resolution_query(Branch("dev")) == "refs/remotes/origin/dev"

    def test_tag(self) -> None:
        assert resolution_query(Tag("v2")) == "refs/tags/v2"

    def test_full_oid_lowercased(self) -> None:
        assert resolution_query(Rev(SHA1.upper())) == SHA1

    def test_expression_unchanged(self) -> None:
        assert resolution_query(Rev("origin/main~1")) == "origin/main~1"

    def test_default_branch(self) -> None:
        assert resolution_query(DefaultBranch()) == "refs/remotes/origin/HEAD"


class TestAmbiguityCandidates:
    def test_short_rev_checks_branch_and_tag(self) -> None:
        assert ambiguity_candidates(Rev("release")) == [
            "refs/remotes/origin/release",
            "refs/tags/release",
        ]

    @pytest.mark.parametrize(
        "reference", [Branch("main"), Tag("v1"), Rev(SHA1), DefaultBranch()]
    )
    def test_unambiguous_kinds(self, reference: Branch | Tag | Rev | DefaultBranch) -> None:
        assert ambiguity_candidates(reference) == []


class TestReferenceValues:
    def test_equality_and_hash(self) -> None:
        assert Branch("main") == Branch("main")
        assert Branch("main") != Tag("main")
        assert len({Tag("v1"), Tag("v1"), Rev("v1")}) == 2

    def test_str_names_kind(self) -> None:
        assert str(Branch("main")) == "branch 'main'"
        assert str(Tag("v1")) == "tag 'v1'"
        assert str(Rev("abc")) == "revision 'abc'"
        assert "HEAD" in str(DefaultBranch())
