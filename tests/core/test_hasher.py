"""Tests for identifier hashing."""

from __future__ import annotations

import hashlib
import re

import pytest
from hypothesis import given
from hypothesis import strategies as st

from kaocache.core.hasher import (
    IdentifierHasher,
    hash_identifier,
    is_supported_algorithm,
    resolve_algorithm,
)
from kaocache.shared.errors import KaoCacheWarning

HEX = re.compile(r"^[0-9a-f]+$")


class TestHashIdentifier:
    """Test the identifier to directory-name mapping."""

    def test_md5_of_base64_encoded_identifier(self):
        """The digest is taken over the base64 form of the identifier."""
        assert hash_identifier("abc", "md5") == "f4c0128178a6a21b7a3dd76729725d91"
        assert (
            hash_identifier("https://example.com/feed", "md5")
            == "fbe535a2595a1446c05964a0655c37eb"
        )

    def test_sha256(self):
        assert (
            hash_identifier("abc", "sha256")
            == "35d95694d3f160215db293c7899daa5907837838fb4b8119ed713e32446c1266"
        )

    def test_empty_identifier_is_hashable(self):
        assert hash_identifier("", "md5") == "d41d8cd98f00b204e9800998ecf8427e"

    def test_unknown_algorithm_falls_back_to_md5(self):
        with pytest.warns(KaoCacheWarning, match="not available"):
            result = hash_identifier("abc", "no-such-digest")

        assert result == "f4c0128178a6a21b7a3dd76729725d91"

    def test_missing_algorithm_falls_back_to_md5(self):
        with pytest.warns(KaoCacheWarning, match="empty"):
            assert hash_identifier("abc", None) == "f4c0128178a6a21b7a3dd76729725d91"

    def test_algorithm_name_is_normalized(self):
        assert hash_identifier("abc", " SHA256 ") == hash_identifier("abc", "sha256")

    def test_shake_uses_fixed_digest_length(self):
        """Variable-length digests are cut to 32 bytes (64 hex chars)."""
        result = hash_identifier("abc", "shake_128")

        assert len(result) == 64
        assert HEX.match(result)

    @given(st.text())
    def test_deterministic_and_hex(self, identifier):
        """Equal identifiers always map to the same lowercase hex name."""
        first = hash_identifier(identifier, "md5")

        assert first == hash_identifier(identifier, "md5")
        assert len(first) == hashlib.md5().digest_size * 2
        assert HEX.match(first)

    @given(st.text(), st.text())
    def test_distinct_identifiers_rarely_collide(self, left, right):
        if left != right:
            assert hash_identifier(left, "sha256") != hash_identifier(right, "sha256")


class TestResolveAlgorithm:
    """Test algorithm name validation and fallback."""

    @pytest.mark.parametrize("name", ["md5", "sha1", "sha256", "SHA256", " sha512 "])
    def test_supported_names_are_normalized(self, name):
        assert is_supported_algorithm(name)
        assert resolve_algorithm(name) == name.strip().lower()

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_name_falls_back_to_md5(self, name):
        with pytest.warns(KaoCacheWarning, match="empty"):
            assert resolve_algorithm(name) == "md5"

    def test_unknown_name_falls_back_to_md5(self):
        with pytest.warns(KaoCacheWarning, match="not available"):
            assert resolve_algorithm("no-such-digest") == "md5"


class TestIdentifierHasher:
    """Test the configured hasher."""

    def test_hash_matches_function(self):
        hasher = IdentifierHasher("sha1")

        assert hasher.algorithm == "sha1"
        assert hasher.hash("abc") == hash_identifier("abc", "sha1")

    def test_invalid_algorithm_resolved_once(self):
        with pytest.warns(KaoCacheWarning):
            hasher = IdentifierHasher("bogus")

        assert hasher.algorithm == "md5"
        assert hasher.hash("abc") == "f4c0128178a6a21b7a3dd76729725d91"
        assert "md5" in repr(hasher)
