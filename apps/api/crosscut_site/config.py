from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path


@dataclass(frozen=True)
class SiteConfig:
    """Identity of the site, shared by every rendered page."""

    site_name: str = "Crosscut"
    former_name: str = "Caterpillar"
    author: str = "Hanno Braun"
    address_lines: tuple[str, ...] = (
        "Hanno Braun",
        "Untere Pfarrgasse 19",
        "64720 Michelstadt",
        "Germany",
    )
    contact_email: str = "hello@hannobraun.com"
    project_url: str = "https://github.com/hannobraun/crosscut"
    stylesheet: str = "/style.css"
    rename_date: date = date(2024, 12, 25)
    canonical_host: str = "www.crosscut.cc"
    legacy_hosts: frozenset[str] = field(
        default_factory=lambda: frozenset({"crosscut.deno.dev", "capi.hannobraun.com", "crosscut.cc"})
    )


@dataclass(frozen=True)
class Settings:
    content_dir: Path
    static_dir: Path
    debug_log: bool
    site: SiteConfig


def _parse_hosts(raw: str) -> frozenset[str]:
    return frozenset(h.strip().lower() for h in raw.split(",") if h.strip())


def load_settings() -> Settings:
    content_dir = Path(os.environ.get("CONTENT_DIR", "./content/daily")).resolve()
    static_dir = Path(os.environ.get("STATIC_DIR", "./static")).resolve()
    debug_log = os.environ.get("DEBUG_LOG", "false").lower() == "true"

    defaults = SiteConfig()
    site = SiteConfig(
        site_name=os.environ.get("SITE_NAME", defaults.site_name),
        contact_email=os.environ.get("CONTACT_EMAIL", defaults.contact_email),
        canonical_host=os.environ.get("CANONICAL_HOST", defaults.canonical_host).lower(),
        legacy_hosts=_parse_hosts(os.environ["LEGACY_HOSTS"]) if "LEGACY_HOSTS" in os.environ else defaults.legacy_hosts,
    )
    return Settings(
        content_dir=content_dir,
        static_dir=static_dir,
        debug_log=debug_log,
        site=site,
    )
