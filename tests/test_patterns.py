"""Tests for sender_identity/patterns.py"""

import pytest

from sender_identity.patterns import (
    PatternCache,
    PatternState,
    clear_pattern_cache,
    compile_pattern,
    configure_pattern_cache,
    get_compiled_pattern,
    get_pattern_cache,
    matches,
    reset_pattern_cache,
    validate_catch_all,
)


class TestCompilePattern:
    """Tests for compile_pattern states."""

    def test_empty_pattern_is_disabled(self):
        """Empty string should disable catch-all matching."""
        assert compile_pattern("").state is PatternState.DISABLED

    def test_whitespace_pattern_is_disabled(self):
        """Whitespace-only pattern should count as empty."""
        assert compile_pattern("   ").state is PatternState.DISABLED

    def test_none_is_disabled(self):
        """None should behave like an empty pattern."""
        assert compile_pattern(None).state is PatternState.DISABLED

    @pytest.mark.parametrize(
        "pattern",
        ["inv[alid", "no-at-sign", "a@b@c.com", "@example.com", "*@", "user name@x.com"],
    )
    def test_malformed_patterns_are_invalid(self, pattern):
        """Malformed patterns should be INVALID with an error and no regex."""
        compiled = compile_pattern(pattern)
        assert compiled.state is PatternState.INVALID
        assert compiled.error
        assert compiled.regex is None

    def test_non_string_is_invalid(self):
        """Non-string pattern should be INVALID and never match."""
        compiled = compile_pattern(42)
        assert compiled.state is PatternState.INVALID
        assert not compiled.matches("42@x.com")

    def test_valid_pattern(self):
        """Well-formed pattern should be VALID with no error."""
        compiled = compile_pattern("*@example.com")
        assert compiled.state is PatternState.VALID
        assert compiled.is_valid
        assert compiled.error is None

    def test_surrounding_whitespace_ignored(self):
        """Whitespace around the pattern should be ignored."""
        assert compile_pattern("  *@example.com ").matches("a@example.com")


class TestWildcardMatching:
    """Tests for matching semantics."""

    def test_local_part_wildcard(self):
        """'*' should match any local part."""
        assert matches("*@domain.com", "anything@domain.com")

    def test_local_part_wildcard_rejects_subdomain(self):
        """A literal domain should not match its subdomains."""
        assert not matches("*@domain.com", "user@sub.domain.com")

    def test_local_part_wildcard_rejects_other_domain(self):
        """A literal domain should not match a different domain."""
        assert not matches("*@domain.com", "user@other.com")

    def test_plus_addressing(self):
        """Plus-address patterns should keep the literal prefix."""
        assert matches("user+*@domain.com", "user+tag@domain.com")
        assert not matches("user+*@domain.com", "other+tag@domain.com")

    def test_wildcard_needs_at_least_one_char(self):
        """'*' should never match an empty string."""
        assert not matches("user+*@domain.com", "user+@domain.com")
        assert not matches("*@domain.com", "@domain.com")

    def test_wildcard_spans_dots_and_symbols(self):
        """'*' should match dots and other symbols."""
        assert matches("*@domain.com", "first.last-x_y+z@domain.com")

    def test_wildcard_never_spans_at(self):
        """'*' should never match '@'."""
        assert not matches("*@domain.com", "a@b@domain.com")

    def test_domain_wildcard_spans_subdomains(self):
        """'*' in the domain part should match subdomain labels."""
        assert matches("*@*.domain.com", "user@mail.eu.domain.com")
        assert not matches("*@*.domain.com", "user@domain.com")

    def test_multiple_wildcards(self):
        """Several wildcards in one part should each need a match."""
        assert matches("*.*@domain.com", "first.last@domain.com")
        assert not matches("*.*@domain.com", "firstlast@domain.com")

    def test_case_insensitive_both_sides(self):
        """Case should be ignored in both pattern and address."""
        assert matches("Sales-*@Domain.COM", "SALES-eu@domain.com")

    def test_literal_dot_is_not_regex_wildcard(self):
        """'.' in a pattern should match only a dot."""
        assert not matches("*@domain.com", "user@domainxcom")

    def test_regex_metacharacters_are_literal(self):
        """Regex metacharacters should be matched literally."""
        assert matches("a(b)+*@x.com", "a(b)+tag@x.com")
        assert not matches("a(b)+*@x.com", "abb+tag@x.com")

    def test_full_string_match(self):
        """Pattern should be anchored at both ends."""
        assert not matches("user@domain.com", "xuser@domain.com")
        assert not matches("user@domain.com", "user@domain.com.evil")

    def test_pattern_without_wildcard_matches_literal_address(self):
        """A wildcard-free pattern should match its own address."""
        assert matches("user@domain.com", "USER@domain.com")

    def test_address_whitespace_trimmed(self):
        """Whitespace around the address should be ignored."""
        assert matches("*@domain.com", "  a@domain.com  ")


class TestFailClosed:
    """Disabled and invalid patterns never match and never raise."""

    def test_disabled_never_matches(self):
        """Empty pattern should never match."""
        assert matches("", "x@y.com") is False

    def test_invalid_never_matches(self):
        """Malformed pattern should never match."""
        assert matches("inv[alid", "x@y.com") is False

    def test_non_string_address(self):
        """Non-string address should not match."""
        assert compile_pattern("*@y.com").matches(None) is False

    def test_empty_address(self):
        """Empty address should not match."""
        assert matches("*@y.com", "") is False


class TestValidateCatchAll:
    """Tests for validate_catch_all."""

    def test_valid(self):
        """Well-formed pattern should validate."""
        assert validate_catch_all("*@example.com") == (True, None)

    def test_empty_is_valid(self):
        """Empty disables catch-all and is an acceptable setting."""
        assert validate_catch_all("") == (True, None)

    def test_invalid_returns_error(self):
        """Malformed pattern should return an error naming the pattern."""
        valid, error = validate_catch_all("example.com")
        assert valid is False
        assert "example.com" in error


class TestPatternCache:
    """Tests for PatternCache."""

    def test_caches_compiled_pattern(self):
        """Second lookup should return the cached instance."""
        cache = PatternCache()
        first = cache.get("*@x.com")
        assert cache.get("*@x.com") is first
        assert "*@x.com" in cache
        assert len(cache) == 1

    def test_caches_invalid_and_disabled(self):
        """Invalid and disabled results should be cached too."""
        cache = PatternCache()
        cache.get("")
        cache.get("bad")
        assert len(cache) == 2

    def test_none_is_not_cached(self):
        """None should compile to DISABLED without a cache entry."""
        cache = PatternCache()
        assert cache.get(None).state is PatternState.DISABLED
        assert len(cache) == 0

    def test_clear(self):
        """clear should remove every entry."""
        cache = PatternCache()
        cache.get("*@x.com")
        cache.clear()
        assert len(cache) == 0
        assert "*@x.com" not in cache

    def test_max_size_empties_when_full(self):
        """A full bounded cache should be emptied before inserting."""
        cache = PatternCache(max_size=2)
        cache.get("*@a.com")
        cache.get("*@b.com")
        cache.get("*@c.com")
        assert len(cache) == 1
        assert "*@c.com" in cache

    def test_resize_below_current_size_clears(self):
        """Shrinking below the current size should empty the cache."""
        cache = PatternCache()
        for domain in ("a", "b", "c"):
            cache.get(f"*@{domain}.com")
        cache.resize(2)
        assert len(cache) == 0
        assert cache.max_size == 2

    def test_negative_size_means_unbounded(self):
        """Negative limits should be treated as unbounded."""
        assert PatternCache(max_size=-5).max_size == 0

    def test_recompiled_pattern_is_equivalent(self):
        """Compiling twice should give matchers with identical output."""
        first = compile_pattern("user+*@x.com")
        second = compile_pattern("user+*@x.com")
        for address in ("user+a@x.com", "user@x.com", "USER+B@X.COM", "other+a@x.com"):
            assert first.matches(address) == second.matches(address)


class TestProcessWideCache:
    """Tests for the shared cache used by matches()."""

    def test_module_cache_used_by_matches(self):
        """matches() should populate and reuse the shared cache."""
        matches("*@module.com", "a@module.com")
        assert "*@module.com" in get_pattern_cache()
        assert get_compiled_pattern("*@module.com") is get_pattern_cache().get("*@module.com")

    def test_same_instance_until_reset(self):
        """The shared cache should be created once and rebuilt only after reset."""
        first = get_pattern_cache()
        assert get_pattern_cache() is first
        reset_pattern_cache()
        assert get_pattern_cache() is not first

    def test_sized_from_config_on_creation(self, monkeypatch):
        """The shared cache should take its limit from configuration."""
        monkeypatch.setenv("SENDER_IDENTITY_PATTERN_CACHE_SIZE", "64")
        assert get_pattern_cache().max_size == 64

    def test_configure_pattern_cache(self):
        """configure_pattern_cache should change the shared limit in place."""
        cache = get_pattern_cache()
        configure_pattern_cache(8)
        assert get_pattern_cache() is cache
        assert cache.max_size == 8

    def test_clear_pattern_cache(self):
        """clear_pattern_cache should empty the shared cache."""
        matches("*@module.com", "a@module.com")
        clear_pattern_cache()
        assert len(get_pattern_cache()) == 0

    def test_clear_before_first_use(self):
        """Clearing before the cache exists should be a no-op."""
        reset_pattern_cache()
        clear_pattern_cache()
        assert len(get_pattern_cache()) == 0
