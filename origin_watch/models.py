from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set


# Per-section outcomes of one run
SKIPPED_SELECTION = "skipped-selection"
SKIPPED_EMPTY = "skipped-empty"
BOOTSTRAPPED = "bootstrapped"
DUPLICATE = "duplicate"
UNCHANGED = "unchanged"
CHANGED = "changed"


@dataclass(frozen=True)
class Section:
    key: str       # stable id used in the state file
    label: str     # category name shown in notifications
    selector: str  # tab text used to switch the board view


@dataclass
class ArticleRef:
    url: str
    title: Optional[str] = None


@dataclass
class NotificationEvent:
    category: str
    url: str
    title: Optional[str] = None


@dataclass
class RunContext:
    is_bootstrap: bool
    sent_this_run: Set[str] = field(default_factory=set)


@dataclass
class RunReport:
    state: Dict[str, Optional[str]]
    outcomes: Dict[str, str] = field(default_factory=dict)
    notified: List[NotificationEvent] = field(default_factory=list)
    committed: bool = False
