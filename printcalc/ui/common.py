from enum import Enum
from typing import Any

import streamlit as st

from printcalc.controller import CalculatorController, PendingKind
from printcalc.models import CONFIGURATION_FIELDS

FLASH_KEY = "flash_message"


def widget_key(field_name: str) -> str:
    return f"field_{field_name}"


def _widget_value(value: Any) -> Any:
    if isinstance(value, (Enum, str)):
        return value
    return str(value)


def sync_widgets(controller: CalculatorController) -> None:
    """Copy the configuration into widget state after it was replaced (first render, load, reset)."""
    stale = st.session_state.get("widget_revision") != controller.revision
    for name in CONFIGURATION_FIELDS:
        key = widget_key(name)
        # Streamlit drops state of widgets that were not rendered on the previous run
        if stale or key not in st.session_state:
            st.session_state[key] = _widget_value(getattr(controller.configuration, name))
    st.session_state["widget_revision"] = controller.revision


def on_field_change(controller: CalculatorController, field_name: str) -> None:
    controller.update(field_name, st.session_state[widget_key(field_name)])


def flash(level: str, message: str) -> None:
    st.session_state[FLASH_KEY] = (level, message)


def render_flash() -> None:
    entry = st.session_state.pop(FLASH_KEY, None)
    if entry is None:
        return
    level, message = entry
    getattr(st, level, st.info)(message)


def _on_confirm(controller: CalculatorController, confirmed: bool) -> None:
    changed, message = controller.confirm(confirmed)
    if message:
        flash("success" if changed else "info", message)


def render_pending_action(controller: CalculatorController) -> None:
    action = controller.pending
    if action is None:
        return

    st.warning(action.prompt)
    confirm_label = {
        PendingKind.SAVE: "Replace oldest save",
        PendingKind.DELETE: "Delete",
        PendingKind.RESET: "Reset everything",
    }[action.kind]
    col1, col2, _ = st.columns([1, 1, 4])
    col1.button(confirm_label, type="primary", on_click=_on_confirm, args=(controller, True))
    col2.button("Cancel", on_click=_on_confirm, args=(controller, False))
