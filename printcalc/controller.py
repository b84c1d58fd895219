import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any

from printcalc import csv_export, snapshots
from printcalc.models import AppState, Breakdown, Configuration, Snapshot, apply_change
from printcalc.pricing import compute_breakdown
from printcalc.snapshots import SaveOutcome, SnapshotNotFound

logger = logging.getLogger(__name__)

RESET_PROMPT = (
    "Reset EVERYTHING (all fields + saves)?\n\n"
    "Ire-reset lahat (fields + saves). Tuloy?"
)
NAME_REQUIRED_MESSAGE = "Enter a product name to save (Ilagay ang pangalan ng produkto)."
STALE_SAVE_MESSAGE = "That save no longer exists (Wala na ang save na ito)."
NO_SAVES_MESSAGE = "No saves to download (Walang save na mada-download)."


class PendingKind(str, Enum):
    SAVE = "save"
    DELETE = "delete"
    RESET = "reset"


@dataclass(frozen=True)
class PendingAction:
    kind: PendingKind
    prompt: str
    save: snapshots.PendingSave | None = None
    index: int | None = None


@dataclass(frozen=True)
class Export:
    filename: str
    content: str

    def to_bytes(self) -> bytes:
        return self.content.encode("utf-8")


class CalculatorController:
    def __init__(
        self,
        state: AppState | None = None,
        persist: Callable[[AppState], Any] | None = None,
        reset_storage: Callable[[], Any] | None = None,
    ):
        self._state = state or AppState()
        self._persist = persist
        self._reset_storage = reset_storage
        self.pending: PendingAction | None = None
        # Bumped whenever the configuration is replaced wholesale (load, reset)
        self.revision = 0

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def configuration(self) -> Configuration:
        return self._state.configuration

    @property
    def saves(self) -> tuple[Snapshot, ...]:
        return self._state.saves

    def breakdown(self) -> Breakdown:
        return compute_breakdown(self.configuration)

    def _commit(self, state: AppState) -> None:
        self._state = state
        if self._persist is not None:
            self._persist(state)

    def update(self, field_name: str, value: Any) -> Configuration:
        configuration = apply_change(self.configuration, field_name, value)
        self._commit(replace(self._state, configuration=configuration))
        return configuration

    def request_save(self, name: str | None = None) -> tuple[SaveOutcome, str]:
        cleaned = (self.configuration.product_name if name is None else name).strip()
        if not cleaned:
            return SaveOutcome.ABORTED, NAME_REQUIRED_MESSAGE

        configuration = replace(self.configuration, product_name=cleaned)
        result = snapshots.save(cleaned, configuration, self.saves)
        if result.outcome is SaveOutcome.CONFIRMATION_REQUIRED:
            self.pending = PendingAction(PendingKind.SAVE, result.pending.prompt, save=result.pending)
            return result.outcome, result.pending.prompt

        self._commit(AppState(configuration=configuration, saves=result.saves))
        return result.outcome, f"Saved: {cleaned}"

    def request_delete(self, index: int) -> tuple[bool, str]:
        try:
            snapshots.delete(self.saves, index, confirmed=False)
        except SnapshotNotFound as exc:
            logger.info("Ignoring delete request: %s", exc)
            return False, STALE_SAVE_MESSAGE
        prompt = snapshots.delete_prompt(self.saves[index])
        self.pending = PendingAction(PendingKind.DELETE, prompt, index=index)
        return True, prompt

    def request_reset(self) -> str:
        self.pending = PendingAction(PendingKind.RESET, RESET_PROMPT)
        return RESET_PROMPT

    def confirm(self, confirmed: bool) -> tuple[bool, str]:
        """Complete or cancel the pending action. Returns (changed, message)."""
        action, self.pending = self.pending, None
        if action is None:
            return False, ""
        if not confirmed:
            return False, "Cancelled."

        if action.kind is PendingKind.SAVE:
            result = snapshots.confirm_save(action.save, confirmed=True)
            configuration = replace(self.configuration, product_name=action.save.snapshot.name)
            self._commit(AppState(configuration=configuration, saves=result.saves))
            return True, f"Saved: {action.save.snapshot.name}"

        if action.kind is PendingKind.DELETE:
            try:
                remaining = snapshots.delete(self.saves, action.index, confirmed=True)
            except SnapshotNotFound as exc:
                logger.info("Ignoring delete confirmation: %s", exc)
                return False, STALE_SAVE_MESSAGE
            self._commit(replace(self._state, saves=remaining))
            return True, "Save deleted."

        logger.info("Resetting all fields and saves")
        if self._reset_storage is not None:
            self._reset_storage()
        self._commit(AppState())
        self.revision += 1
        return True, "Everything was reset."

    def load(self, index: int) -> bool:
        try:
            _, configuration = snapshots.load(self.saves, index)
        except SnapshotNotFound as exc:
            logger.info("Ignoring load request: %s", exc)
            return False
        self._commit(replace(self._state, configuration=configuration))
        self.revision += 1
        return True

    def export_one(self, index: int) -> Export | None:
        if not 0 <= index < len(self.saves):
            logger.info("Ignoring export of missing save #%s", index)
            return None
        snapshot = self.saves[index]
        return Export(csv_export.export_filename(snapshot.name), csv_export.to_document([snapshot]))

    def export_all(self, today: date | None = None) -> Export | None:
        if not self.saves:
            return None
        return Export(csv_export.bulk_export_filename(today), csv_export.to_document(self.saves))
