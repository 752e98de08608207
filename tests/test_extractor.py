"""Tests for the extraction engine: matches, subs, macros, pluck."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from concurrent.futures import ThreadPoolExecutor

import pytest

from substractor import (
    Substractor, SubstractorConfig,
    matches, subs, find_macros, macros, macros_all, pluck, pluck_all,
)


# ── matches ──────────────────────────────────────────────────────────

def test_matches_anywhere_in_subject():
    assert matches(
        "https://example.test/welcome.html https://example.test https://sub.example.test/index.html",
        "https://*.*.*/",
    )


def test_matches_trailing_wildcard():
    assert matches("https://example.test/welcome.html", "https://*.*.*")


def test_matches_rejects():
    assert not matches("https://example.test/welcome.html", "https://*.*.*/")


def test_matches_protocol_variants():
    for subject in ("http://example.test", "https://example.test"):
        assert matches(subject, "http*://example.test")


def test_matches_versions():
    assert matches("1.2.10", "*.*.??")
    assert matches("1.2.3-beta.1", "*.*.*-*")
    assert matches("xx1.2.3yy", "?.?.?")
    assert not matches("1.2", "*.*.*")


def test_matches_with_redaction():
    assert not matches("[Foo Bar](https://example.test/)", "[*](*)")
    assert matches("[Foo Bar](https://example.test/)", "[*](*)", " ")


def test_pattern_literals_never_match_placeholders():
    assert not matches("ab cd", "b*0", " ")
    assert not matches("a b", "a_b", " ")
    assert macros("x a b", "{p}?b", " ") == {"p": "x a"}


def test_private_use_characters_in_pattern_are_not_placeholders():
    assert not matches("a b", "a\ue000b", " ")
    assert matches("a\ue000b c", "a\ue000b", " ")


def test_matches_ignore_case():
    s = Substractor(SubstractorConfig(ignore_case=True))
    assert s.matches("HTTPS://EXAMPLE.TEST", "https://*")
    assert not matches("HTTPS://EXAMPLE.TEST", "https://*")


# ── subs ─────────────────────────────────────────────────────────────

def test_subs_across_patterns():
    found = subs(
        "example.com/welcome.html example.com example.net/index.php sub.example.com/index.html",
        ["*.com/*.html", "*.*.com/*.html"],
    )
    assert found == [
        "example.com/welcome.html",
        "sub.example.com/index.html",
        "sub.example.com/index.html",
    ]


def test_subs_full_redaction():
    assert subs("[e-mail](mailto:jeffpacks@varen.no)", "mailto:*@*", {")": True}) == [
        "mailto:jeffpacks@varen.no",
    ]


def test_subs_pre_redaction_is_restored():
    assert subs("[e-mail](mailto:jeffpacks@varen.no)", "mailto:*@*", ")") == [
        "mailto:jeffpacks@varen.no)",
    ]


def test_subs_post_redaction():
    assert subs("[e-mail](mailto:jeffpacks@varen.no)", "mailto:*@*", {")": False}) == [
        "mailto:jeffpacks@varen.no",
    ]


def test_subs_key_gating():
    found = subs("1.2.3-beta.1 and 4.5.6", {
        "*-beta.*": "?.?.?",
        "*-alpha.*": "*-alpha",
    })
    assert found == ["1.2.3", "4.5.6"]


def test_subs_no_match():
    assert subs("nothing here", "*.com") == []


def test_question_mark_consumes_one_redacted_target():
    assert subs("a b", "a?", " ") == ["a "]
    assert matches("a b", "a?b", " ")
    assert subs("x--y", "x?y", {"--": None}) == ["x--y"]


# ── macros ───────────────────────────────────────────────────────────

def test_macros_first_occurrence():
    assert macros("foo:bar hurf:durf", "{a}:{b}") == {"a": "foo", "b": "bar"}


def test_macros_space_separated():
    assert macros("foo:bar hurf:durf", "{a}:{b} {c}:{d}") == {
        "a": "foo", "b": "bar", "c": "hurf", "d": "durf",
    }


def test_macros_colon_separated():
    assert macros("foo:bar:hurf:durf", "{a}:{b}:{c}:{d}") == {
        "a": "foo", "b": "bar", "c": "hurf", "d": "durf",
    }


def test_macros_url():
    assert macros("https://example.test/index.html", "{protocol}://{domain}.{top}/*") == {
        "protocol": "https", "domain": "example", "top": "test",
    }
    assert macros("jeffpacks.example.com/index.html", "{subdomain}.{domain}.*") == {
        "domain": "example", "subdomain": "jeffpacks",
    }


def test_macros_version():
    assert macros("2.0.12-beta.1", "{major}.{minor}.{patch}-*") == {
        "major": "2", "minor": "0", "patch": "12",
    }
    assert macros("This is version 2.0.12 inside a sentence", "* {major}.{minor}.{patch} *") == {
        "major": "2", "minor": "0", "patch": "12",
    }


def test_macros_key_gating():
    patterns = {
        "*.*.*-alpha.*": "{major}.{minor}.{patch}-*.{alpha}",
        "*.*.*-beta.*": "{major}.{minor}.{patch}-*.{beta}",
    }
    assert macros("1.2.3-alpha.1", patterns) == {
        "major": "1", "minor": "2", "patch": "3", "alpha": "1",
    }
    assert macros("1.2.3-beta.1", patterns) == {
        "major": "1", "minor": "2", "patch": "3", "beta": "1",
    }


def test_macros_key_gates_all_fail():
    assert macros("1.2.3", {"*-rc.*": "{a}.{b}"}) == {}


def test_macros_empty_captures_are_present():
    assert macros("...ok", ["{one}.{two}.{three}.{four}"]) == {
        "one": "", "two": "", "three": "", "four": "ok",
    }


def test_macros_with_redaction():
    assert macros("[Foo Bar](https://example.test/)", "[{text}]({url})", " ") == {
        "text": "Foo Bar",
        "url": "https://example.test/",
    }


def test_macros_best_candidate_wins():
    assert macros("1.2.3", ["{a}.*", "{a}.{b}.{c}"]) == {"a": "1", "b": "2", "c": "3"}


def test_macros_tie_keeps_first_candidate():
    assert macros("foo:bar", ["{x}:*", "{y}:*"]) == {"x": "foo"}


def test_macros_no_match():
    assert macros("no separators", "{a}:{b}") == {}


def test_macros_repeated_name_keeps_last():
    assert macros("a:b", "{x}:{x}") == {"x": "b"}


def test_macros_unbalanced_brace_is_literal():
    assert macros("{a:b", "{a:{b}") == {"b": "b"}
    assert macros("x{y", "{") == {}


def test_macros_rejects_non_string_patterns():
    with pytest.raises(TypeError):
        macros("x", 42)
    with pytest.raises(TypeError):
        macros("x", ["{a}", 1])


# ── macros_all ───────────────────────────────────────────────────────

def test_macros_all_occurrences():
    assert macros_all("foo:bar hurf:durf", "{a}:{b}") == {
        "a": ["foo", "hurf"],
        "b": ["bar", "durf"],
    }


def test_macros_all_counts_names_not_occurrences():
    assert macros_all("a:b c:d", ["{x}:*", "{x}:{y}"]) == {
        "x": ["a", "c"],
        "y": ["b", "d"],
    }


def test_macros_all_no_match():
    assert macros_all("nothing", "{a}:{b}") == {}


def test_macros_all_repeated_name_keeps_last_group():
    assert macros_all("a:b c:d", "{x}:{x}") == {"x": ["b", "d"]}


# ── pluck ────────────────────────────────────────────────────────────

def test_pluck():
    assert pluck("2.5.1", "{major}.{minor}.{patch}", "minor") == "5"
    assert pluck("2.5.1", "{major}.{minor}.{patch}", "build") is None


def test_pluck_all():
    assert pluck_all("foo:bar hurf:durf", "{a}:{b}", "b") == ["bar", "durf"]
    assert pluck_all("foo:bar hurf:durf", "{a}:{b}", "c") == []


# ── find_macros ──────────────────────────────────────────────────────

def test_find_macros_offsets():
    found = find_macros("x 1.2", "{a}.{b}")
    assert [(m.name, m.start, m.end, m.text) for m in found] == [
        ("a", 2, 3, "1"),
        ("b", 4, 5, "2"),
    ]


def test_find_macros_offsets_survive_redaction():
    subject = "[Foo Bar](u)"
    found = find_macros(subject, "[{text}]({url})", " ")
    assert [(m.name, subject[m.start:m.end], m.text) for m in found] == [
        ("text", "Foo Bar", "Foo Bar"),
        ("url", "u", "u"),
    ]


# ── Configuration ────────────────────────────────────────────────────

def test_default_redaction_from_config():
    s = Substractor(SubstractorConfig(redact=" "))
    assert s.macros("[Foo Bar](u)", "[{text}]({url})") == {"text": "Foo Bar", "url": "u"}
    # An explicit spec replaces the default
    assert s.macros("[Foo Bar](u)", "[{text}]({url})", []) == {}


def test_calls_do_not_share_redaction_state():
    s = Substractor()

    def run(i: int) -> dict:
        if i % 2:
            return s.macros("[Foo Bar](u)", "[{text}]({url})", " ")
        return s.macros("[Foo-Bar](u)", "[{text}]({url})", {"-": False})

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(run, range(200)))

    for i, result in enumerate(results):
        expected = "Foo Bar" if i % 2 else "FooBar"
        assert result == {"text": expected, "url": "u"}
