"""Tests for cid normalization into safe identifiers."""
import re

import pytest

from filecache.keys import hash_cid, is_safe, normalize

SAFE = re.compile(r"[a-zA-Z0-9_-]+")


def test_plain_cid_is_kept():
    assert normalize("node_42-teaser") == "node_42-teaser"


def test_hostile_chars_are_substituted():
    assert normalize("views/page:1.html") == "views-page-1-html"
    assert normalize("a%b=c?d@e") == "a-b-c-d-e"


def test_unsafe_cid_falls_back_to_hash():
    out = normalize("меню:главное")
    assert out == hash_cid("меню:главное")
    assert len(out) == 43
    assert SAFE.fullmatch(out)


def test_empty_cid_is_hashed():
    assert normalize("") == hash_cid("")


def test_overlong_cid_is_hashed():
    cid = "x" * 500
    assert normalize(cid) == hash_cid(cid)


def test_hash_is_deterministic_and_distinct():
    assert hash_cid("a b c") == hash_cid("a b c")
    assert hash_cid("a!") != hash_cid("a#")


@pytest.mark.parametrize(
    "cid",
    ["", "simple", "theme:registry:bartik", "/abs/path.php?x=1", "emoji 🎉", "tab\tand\nnewline", "ü" * 300, "a*b"],
)
def test_normalize_is_idempotent_and_safe(cid):
    once = normalize(cid)
    assert normalize(once) == once
    assert SAFE.fullmatch(once)
    assert is_safe(once)


def test_different_cids_can_collide():
    """Substitution is lossy: such cids share one entry."""
    assert normalize("a/b") == normalize("a:b") == "a-b"
