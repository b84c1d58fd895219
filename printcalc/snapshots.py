"""Named snapshots of the calculator inputs, at most MAX_SAVES, most recent first."""
import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum

from printcalc.models import MAX_SAVES, Configuration, Snapshot

logger = logging.getLogger(__name__)


class SnapshotNotFound(LookupError):
    def __init__(self, index: int, count: int):
        super().__init__(f"No saved computation at index {index} (have {count}).")
        self.index = index
        self.count = count


class SaveOutcome(str, Enum):
    SAVED = "saved"
    CONFIRMATION_REQUIRED = "confirmation_required"
    ABORTED = "aborted"


@dataclass(frozen=True)
class PendingSave:
    snapshot: Snapshot
    saves: tuple[Snapshot, ...]

    @property
    def evicted(self) -> Snapshot:
        return self.saves[-1]

    @property
    def prompt(self) -> str:
        name = self.evicted.name
        return (
            f'You already have {MAX_SAVES} saves. Replace the oldest save ("{name}") '
            "and push the others down?\n\n"
            f'May {MAX_SAVES} saves ka na. Palitan ang pinakalumang save ("{name}") '
            "at itulak pababa ang iba?"
        )


@dataclass(frozen=True)
class SaveResult:
    saves: tuple[Snapshot, ...]
    outcome: SaveOutcome
    pending: PendingSave | None = None


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_snapshot(name: str, configuration: Configuration, saved_at: str | None = None) -> Snapshot:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("A saved computation needs a product name.")
    return Snapshot(name=cleaned, saved_at=saved_at or utc_now_iso(), configuration=configuration)


def save(
    name: str,
    configuration: Configuration,
    saves: Sequence[Snapshot],
    saved_at: str | None = None,
) -> SaveResult:
    current = tuple(saves)
    snapshot = build_snapshot(name, configuration, saved_at)
    if len(current) < MAX_SAVES:
        return SaveResult(saves=(snapshot, *current), outcome=SaveOutcome.SAVED)
    return SaveResult(
        saves=current,
        outcome=SaveOutcome.CONFIRMATION_REQUIRED,
        pending=PendingSave(snapshot=snapshot, saves=current),
    )


def confirm_save(pending: PendingSave, confirmed: bool) -> SaveResult:
    if not confirmed:
        return SaveResult(saves=pending.saves, outcome=SaveOutcome.ABORTED)

    logger.info("Replacing oldest save %r with %r", pending.evicted.name, pending.snapshot.name)
    return SaveResult(
        saves=(pending.snapshot, *pending.saves)[:MAX_SAVES],
        outcome=SaveOutcome.SAVED,
    )


def _get(saves: Sequence[Snapshot], index: int) -> Snapshot:
    if not 0 <= index < len(saves):
        raise SnapshotNotFound(index, len(saves))
    return saves[index]


def load(saves: Sequence[Snapshot], index: int) -> tuple[str, Configuration]:
    """Return the snapshot's name and its configuration, with the product name set to that name."""
    snapshot = _get(saves, index)
    return snapshot.name, replace(snapshot.configuration, product_name=snapshot.name)


def delete(saves: Sequence[Snapshot], index: int, confirmed: bool) -> tuple[Snapshot, ...]:
    current = tuple(saves)
    _get(current, index)
    if not confirmed:
        return current
    return current[:index] + current[index + 1:]


def delete_prompt(snapshot: Snapshot) -> str:
    return f'Delete save "{snapshot.name}"? (Burahin ang save na ito?)'
