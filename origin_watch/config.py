import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from .models import Section


load_dotenv()


DEFAULT_SECTIONS: Tuple[Section, ...] = (
    Section(key="news", label="News", selector="News"),
    Section(key="notices", label="Notices", selector="Notices"),
    Section(key="dev", label="Developer notes", selector="Developer notes"),
)


@dataclass(frozen=True)
class Settings:
    webhook_url: str
    state_file: Path = Path("state.json")
    base_url: str = "https://7origin.netmarble.com"
    board_path: str = "/en/"
    board_menu_text: str = "News"
    article_url_pattern: str = "/en/news/{id}/{id}"
    brand_name: str = "Netmarble"
    call_timeout: float = 60.0
    # Per-strategy click timeout; a miss falls through to the next strategy
    select_timeout: float = 5.0
    # Settle delays (seconds) for client-side rendering after each interaction
    board_settle: float = 2.5
    tab_settle: float = 2.0
    article_settle: float = 1.2
    headless: bool = True
    sections: Tuple[Section, ...] = DEFAULT_SECTIONS
    username: str = "7DS Origins • Watch"
    footer: str = "Source: 7origin.netmarble.com"

    @property
    def board_url(self) -> str:
        return self.base_url.rstrip("/") + self.board_path


def load_sections(path: Path) -> Tuple[Section, ...]:
    """Read an ordered section table from a JSON list of {key, label, selector}."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise RuntimeError(f"Cannot read sections from {path}: {exc}") from exc

    if not isinstance(raw, list) or not raw:
        raise RuntimeError(f"{path} must contain a non-empty JSON list of sections")

    sections = []
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get("key"):
            raise RuntimeError(f"Invalid section entry in {path}: {entry!r}")
        label = entry.get("label") or entry["key"]
        sections.append(
            Section(
                key=entry["key"],
                label=label,
                selector=entry.get("selector") or label,
            )
        )
    return validate_sections(tuple(sections))


def validate_sections(sections: Tuple[Section, ...]) -> Tuple[Section, ...]:
    seen = set()
    for section in sections:
        if section.key in seen:
            raise RuntimeError(f"Duplicate section key: {section.key}")
        seen.add(section.key)
    return sections


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise RuntimeError(f"{name} must be positive, got {raw!r}")
    return value


def get_settings(dry_run: bool = False, state_file: Optional[str] = None) -> Settings:
    webhook = os.getenv("DISCORD_WEBHOOK", "").strip()
    if not webhook and not dry_run:
        raise RuntimeError("Missing DISCORD_WEBHOOK in environment or .env")

    sections_file = os.getenv("SECTIONS_FILE")
    sections = load_sections(Path(sections_file)) if sections_file else DEFAULT_SECTIONS

    return Settings(
        webhook_url=webhook,
        state_file=Path(state_file or os.getenv("STATE_FILE", "state.json")),
        base_url=os.getenv("BASE_URL", "https://7origin.netmarble.com"),
        board_path=os.getenv("BOARD_PATH", "/en/"),
        article_url_pattern=os.getenv("ARTICLE_URL_PATTERN", "/en/news/{id}/{id}"),
        call_timeout=_env_float("CALL_TIMEOUT", 60.0),
        select_timeout=_env_float("SELECT_TIMEOUT", 5.0),
        headless=os.getenv("HEADLESS", "1") != "0",
        sections=sections,
    )
