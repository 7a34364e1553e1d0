# tests/test_robots.py
from __future__ import annotations

import httpx
import pytest
import respx
from httpx import Response

from quackfetch.fetch import robots

UA = "quackfetch/0.1 (+https://github.com/quackfetch/quackfetch)"


# --------------------------------- parsing ----------------------------------------------


def test_wildcard_record_collects_rules():
    rules = robots.parse_robots("User-agent: *\nDisallow: /private\nAllow: /private/ok\n", UA)
    assert rules.disallow == ("/private",)
    assert rules.allow == ("/private/ok",)


def test_field_names_are_case_insensitive():
    rules = robots.parse_robots("USER-AGENT: *\nDISALLOW: /a\nallow: /a/b\n", UA)
    assert rules.disallow == ("/a",)
    assert rules.allow == ("/a/b",)


def test_record_for_other_agent_is_ignored():
    rules = robots.parse_robots("User-agent: Googlebot\nDisallow: /\n", UA)
    assert rules.empty
    assert robots.is_allowed(rules, "/anything")


def test_agent_matches_as_substring_of_user_agent():
    text = "User-agent: quackfetch\nDisallow: /html\n"
    assert not robots.check_robots_txt(text, UA, "/html/?q=x")


def test_empty_disallow_clears_rules_gathered_so_far():
    text = "User-agent: *\nDisallow: /a\nDisallow: /b\nDisallow:\n"
    rules = robots.parse_robots(text, UA)
    assert rules.disallow == ()
    assert robots.is_allowed(rules, "/a")


def test_last_applicable_record_wins_without_merging():
    text = (
        "User-agent: *\n"
        "Disallow: /first\n"
        "\n"
        "User-agent: Googlebot\n"
        "Disallow: /google-only\n"
        "\n"
        "User-agent: quackfetch\n"
        "Disallow: /second\n"
    )
    rules = robots.parse_robots(text, UA)
    assert rules.disallow == ("/second",)
    assert robots.is_allowed(rules, "/first")
    assert robots.is_allowed(rules, "/google-only")
    assert not robots.is_allowed(rules, "/second/page")


def test_non_applicable_record_does_not_reset_rules():
    text = "User-agent: *\nDisallow: /kept\n\nUser-agent: Bingbot\nDisallow: /bing\n"
    rules = robots.parse_robots(text, UA)
    assert rules.disallow == ("/kept",)


def test_grouped_agent_lines_form_one_record():
    text = "User-agent: Googlebot\nUser-agent: *\nDisallow: /shared\n"
    rules = robots.parse_robots(text, UA)
    assert rules.disallow == ("/shared",)


def test_comments_are_stripped():
    rules = robots.parse_robots("User-agent: * # everyone\nDisallow: /tmp # scratch\n", UA)
    assert rules.disallow == ("/tmp",)


@pytest.mark.parametrize("text", [None, "", "   \n\n", "garbage without colons"])
def test_missing_or_junk_content_allows_everything(text):
    assert robots.check_robots_txt(text, UA, "/html/")


# --------------------------------- matching ---------------------------------------------


@pytest.mark.parametrize(
    "path, rule, expected",
    [
        ("/search", "/search", True),
        ("/search/more", "/search", True),
        ("/searching", "/search", True),
        ("/search?q=1", "/search*", True),
        ("/sear", "/search", False),
        ("/other", "/search*", False),
        ("/x", "", False),
        ("", "/x", False),
    ],
)
def test_path_matches_rule(path, rule, expected):
    assert robots.path_matches_rule(path, rule) is expected


def test_any_matching_allow_overrides_disallow():
    # Allow is shorter than Disallow here; it still wins in this simplified model
    rules = robots.RobotsRuleSet(disallow=("/html/private",), allow=("/html",))
    assert robots.is_allowed(rules, "/html/private/page")


def test_disallow_without_matching_allow_blocks():
    rules = robots.RobotsRuleSet(disallow=("/html",), allow=("/lite",))
    assert not robots.is_allowed(rules, "/html/?q=test")


def test_none_rule_set_allows():
    assert robots.is_allowed(None, "/anything")


# --------------------------------- fetching ---------------------------------------------


@respx.mock
def test_fetch_robots_txt_returns_text_on_200():
    route = respx.get("https://site.test/robots.txt").mock(
        return_value=Response(200, text="User-agent: *\nDisallow: /x\n")
    )
    with httpx.Client() as client:
        text = robots.fetch_robots_txt(client, "https://site.test", UA)
    assert text is not None and "Disallow: /x" in text
    assert route.calls[0].request.headers["User-Agent"] == UA


@pytest.mark.parametrize("status", [404, 403, 500, 503])
@respx.mock
def test_fetch_robots_txt_non_2xx_is_none(status):
    respx.get("https://site.test/robots.txt").mock(return_value=Response(status))
    with httpx.Client() as client:
        assert robots.fetch_robots_txt(client, "https://site.test", UA) is None


@pytest.mark.parametrize("exc", [httpx.ConnectError("refused"), httpx.ReadTimeout("slow")])
@respx.mock
def test_fetch_robots_txt_network_failure_is_none(exc):
    respx.get("https://site.test/robots.txt").mock(side_effect=exc)
    with httpx.Client() as client:
        assert robots.fetch_robots_txt(client, "https://site.test", UA) is None


@respx.mock
def test_fetch_robots_txt_timeout_defaults_to_five_seconds():
    route = respx.get("https://site.test/robots.txt").mock(return_value=Response(200, text=""))
    with httpx.Client() as client:
        robots.fetch_robots_txt(client, "https://site.test", UA)
        robots.fetch_robots_txt(client, "https://site.test", UA, timeout_s=1.5)
    assert route.calls[0].request.extensions["timeout"]["read"] == 5.0
    assert route.calls[1].request.extensions["timeout"]["read"] == 1.5


@respx.mock
def test_fetch_robots_txt_follows_redirects():
    respx.get("https://site.test/robots.txt").mock(
        return_value=Response(302, headers={"Location": "https://cdn.site.test/robots.txt"})
    )
    respx.get("https://cdn.site.test/robots.txt").mock(
        return_value=Response(200, text="User-agent: *\nDisallow: /x\n")
    )
    # a client that does not follow redirects by default
    with httpx.Client(follow_redirects=False) as client:
        text = robots.fetch_robots_txt(client, "https://site.test", UA)
    assert text is not None and "Disallow: /x" in text
