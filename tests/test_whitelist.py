"""
Tests for the whitelist matcher.
"""

from auditgate.core.policy.whitelist import WhitelistSet, is_whitelisted, matching_entry


class TestIsWhitelisted:
    def test_exact_match(self):
        wl = WhitelistSet.of(["lynis"])
        assert is_whitelisted("lynis", wl)

    def test_versioned_name_matches(self):
        wl = WhitelistSet.of(["linux-exploit-suggester"])
        assert is_whitelisted("linux-exploit-suggester-v3", wl)

    def test_suffix_is_tolerated(self):
        # Substring matching is permissive by nature
        wl = WhitelistSet.of(["lynis"])
        assert is_whitelisted("lynis-fake", wl)

    def test_unrelated_rejected(self):
        wl = WhitelistSet.of(["lynis"])
        assert not is_whitelisted("unrelated", wl)

    def test_case_sensitive(self):
        wl = WhitelistSet.of(["lynis"])
        assert not is_whitelisted("Lynis", wl)

    def test_empty_whitelist_rejects_everything(self):
        wl = WhitelistSet.of([])
        assert not is_whitelisted("lynis", wl)
        assert not is_whitelisted("", wl)

    def test_no_globbing(self):
        wl = WhitelistSet.of(["lyn*"])
        assert not is_whitelisted("lynis", wl)

    def test_contains_operator(self):
        wl = WhitelistSet.of(["LinEnum"])
        assert "LinEnum" in wl
        assert "LinEnum.sh" in wl
        assert "linpeas" not in wl
        assert 42 not in wl
        assert len(wl) == 1


class TestStrictMode:
    def test_exact_match_still_allowed(self):
        wl = WhitelistSet.of(["lynis"], strict=True)
        assert is_whitelisted("lynis", wl)

    def test_substring_rejected(self):
        wl = WhitelistSet.of(["lynis"], strict=True)
        assert not is_whitelisted("lynis-fake", wl)


class TestMatchingEntry:
    def test_exact_wins(self):
        wl = WhitelistSet.of(["lynis", "lyn"])
        assert matching_entry("lynis", wl) == "lynis"

    def test_substring_token_reported(self):
        wl = WhitelistSet.of(["linux-exploit-suggester"])
        assert matching_entry("linux-exploit-suggester-2", wl) == "linux-exploit-suggester"

    def test_none_when_rejected(self):
        wl = WhitelistSet.of(["lynis"])
        assert matching_entry("checksec", wl) is None

    def test_none_for_substring_in_strict_mode(self):
        wl = WhitelistSet.of(["lynis"], strict=True)
        assert matching_entry("lynis-fake", wl) is None
