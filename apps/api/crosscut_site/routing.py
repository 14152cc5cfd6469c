"""Request classification.

Every request maps to exactly one `RouteDecision`. Rules are checked in the
order of `RULES`; the first matching rule decides.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .config import SiteConfig

_NOTE_PATH_RE = re.compile(r"/daily/(\d{4}-\d{2}-\d{2})", re.ASCII)
_NOTE_PATH_SLASH_RE = re.compile(r"/daily/(\d{4}-\d{2}-\d{2})/", re.ASCII)


@dataclass(frozen=True)
class RouteRequest:
    host: str
    path: str
    query: str = ""
    origin: str = ""
    # Path as sent by the client, still percent-encoded
    raw_path: str = ""


@dataclass(frozen=True)
class LegacyRedirect:
    location: str
    status_code: int = 308


@dataclass(frozen=True)
class Redirect:
    location: str
    status_code: int = 307


@dataclass(frozen=True)
class IndexPage:
    pass


@dataclass(frozen=True)
class NotePage:
    date: str


@dataclass(frozen=True)
class StaticFallback:
    path: str


RouteDecision = Union[LegacyRedirect, Redirect, IndexPage, NotePage, StaticFallback]

Rule = Callable[[RouteRequest, SiteConfig], Optional[RouteDecision]]


def normalize_host(host: str | None) -> str:
    return (host or "").lower().rstrip(".")


def _legacy_domain(req: RouteRequest, site: SiteConfig) -> RouteDecision | None:
    if normalize_host(req.host) not in site.legacy_hosts:
        return None
    location = f"https://{site.canonical_host}{req.raw_path or req.path}"
    if req.query:
        location = f"{location}?{req.query}"
    return LegacyRedirect(location)


def _root(req: RouteRequest, site: SiteConfig) -> RouteDecision | None:
    if req.path == "/":
        return Redirect(f"{req.origin}/daily")
    return None


def _index_trailing_slash(req: RouteRequest, site: SiteConfig) -> RouteDecision | None:
    if req.path == "/daily/":
        return Redirect(f"{req.origin}/daily")
    return None


def _index(req: RouteRequest, site: SiteConfig) -> RouteDecision | None:
    if req.path == "/daily":
        return IndexPage()
    return None


def _note_trailing_slash(req: RouteRequest, site: SiteConfig) -> RouteDecision | None:
    m = _NOTE_PATH_SLASH_RE.fullmatch(req.path)
    if m:
        return Redirect(f"{req.origin}/daily/{m.group(1)}")
    return None


def _note(req: RouteRequest, site: SiteConfig) -> RouteDecision | None:
    m = _NOTE_PATH_RE.fullmatch(req.path)
    if m:
        return NotePage(m.group(1))
    return None


RULES: list[Rule] = [
    _legacy_domain,
    _root,
    _index_trailing_slash,
    _index,
    _note_trailing_slash,
    _note,
]


def decide_route(req: RouteRequest, site: SiteConfig) -> RouteDecision:
    for rule in RULES:
        decision = rule(req, site)
        if decision is not None:
            return decision
    return StaticFallback(req.path)
