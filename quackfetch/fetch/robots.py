# quackfetch/fetch/robots.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

from quackfetch import config

log = logging.getLogger(__name__)

# --------------------------------------------------------------------------------------
# Data structures
# --------------------------------------------------------------------------------------


@dataclass(frozen=True)
class RobotsRuleSet:
    """
    Allow/disallow prefixes of the last robots.txt record that applies to a user agent.

    An empty rule set allows everything.
    """

    disallow: tuple[str, ...] = field(default_factory=tuple)
    allow: tuple[str, ...] = field(default_factory=tuple)

    @property
    def empty(self) -> bool:
        return not self.disallow and not self.allow


ALLOW_ALL = RobotsRuleSet()

# --------------------------------------------------------------------------------------
# Helpers
# --------------------------------------------------------------------------------------


def _strip_comment(line: str) -> str:
    # remove comments starting with '#'
    idx = line.find("#")
    return line if idx < 0 else line[:idx]


def _split_kv(line: str) -> tuple[str, str] | None:
    if ":" not in line:
        return None
    k, v = line.split(":", 1)
    return k.strip().lower(), v.strip()


def _agent_applies(agent: str, user_agent: str) -> bool:
    if agent == "*":
        return True
    if not agent:
        return False
    return agent.lower() in user_agent.lower()


# --------------------------------------------------------------------------------------
# Public API
# --------------------------------------------------------------------------------------


def parse_robots(text: str | None, user_agent: str) -> RobotsRuleSet:
    """
    Minimal robots.txt parser supporting:
      - User-agent (a record applies if its agent is '*' or a substring of user_agent)
      - Disallow (an empty value clears the disallows gathered so far)
      - Allow

    Consecutive User-agent lines form one record. Each applicable record
    starts a fresh rule set; only the last applicable record survives.
    Crawl-delay, Sitemap and anything else are ignored.
    """
    if not text or not isinstance(text, str):
        return ALLOW_ALL

    disallow: list[str] = []
    allow: list[str] = []
    record_applies = False
    in_agent_lines = False

    for raw in text.splitlines():
        line = _strip_comment(raw).strip()
        if not line:
            continue
        kv = _split_kv(line)
        if not kv:
            continue
        key, val = kv

        if key == "user-agent":
            if not in_agent_lines:
                # first UA line of a new record
                record_applies = False
            in_agent_lines = True
            if _agent_applies(val, user_agent) and not record_applies:
                record_applies = True
                disallow = []
                allow = []
            continue

        in_agent_lines = False
        if not record_applies:
            continue

        if key == "disallow":
            if val:
                disallow.append(val)
            else:
                # empty Disallow means "allow all"
                disallow = []
        elif key == "allow":
            if val:
                allow.append(val)

    return RobotsRuleSet(disallow=tuple(disallow), allow=tuple(allow))


def path_matches_rule(path: str, rule: str) -> bool:
    """Exact match, '*'-suffixed prefix match, or plain prefix match."""
    if not rule or not path:
        return False
    if path == rule:
        return True
    if rule.endswith("*"):
        return path.startswith(rule[:-1])
    return path.startswith(rule)


def is_allowed(rules: RobotsRuleSet | None, path: str) -> bool:
    """
    A path is blocked when some Disallow rule matches it and no Allow rule does.
    Any matching Allow wins regardless of length. No rules → allowed.
    """
    if rules is None or rules.empty:
        return True
    for rule in rules.disallow:
        if path_matches_rule(path, rule):
            if not any(path_matches_rule(path, a) for a in rules.allow):
                return False
    return True


def check_robots_txt(text: str | None, user_agent: str, path: str) -> bool:
    """Parse and evaluate in one step. Missing content allows everything."""
    return is_allowed(parse_robots(text, user_agent), path)


def fetch_robots_txt(
    client: httpx.Client,
    origin: str,
    user_agent: str,
    *,
    timeout_s: float | None = None,
) -> str | None:
    """
    GET {origin}/robots.txt and return its text.

    Returns None on any failure (network error, timeout, non-2xx) so the caller
    treats the host as unrestricted.
    """
    url = f"{origin.rstrip('/')}/robots.txt"
    timeout = config.ROBOTS_TIMEOUT_S if timeout_s is None else timeout_s
    try:
        resp = client.get(
            url,
            headers={"User-Agent": user_agent},
            timeout=timeout,
            follow_redirects=True,
        )
    except httpx.HTTPError as exc:
        log.debug("robots.txt unavailable at %s (%s); allowing", url, type(exc).__name__)
        return None

    if not resp.is_success:
        log.debug("robots.txt at %s returned %s; allowing", url, resp.status_code)
        return None
    return resp.text


__all__ = [
    "ALLOW_ALL",
    "RobotsRuleSet",
    "check_robots_txt",
    "fetch_robots_txt",
    "is_allowed",
    "parse_robots",
    "path_matches_rule",
]
