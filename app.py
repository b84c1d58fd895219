import logging
import os
from pathlib import Path

import streamlit as st
from dotenv import load_dotenv

from printcalc.controller import CalculatorController
from printcalc.db import persist_app_state, reset_storage, restore_app_state
from printcalc.providers.countapi import UsageCounterTask
from printcalc.ui import calculator, saves


# Load environment variables from local .env file.
load_dotenv(dotenv_path=Path(__file__).parent / ".env")

logging.basicConfig(
    level=os.getenv("PRINTCALC_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

st.set_page_config(page_title="3D Printing Calculator", page_icon="🖨️", layout="wide")


def _get_controller() -> CalculatorController:
    if "controller" not in st.session_state:
        st.session_state["controller"] = CalculatorController(
            restore_app_state(),
            persist=persist_app_state,
            reset_storage=reset_storage,
        )
    return st.session_state["controller"]


def _render_usage_counter() -> None:
    if "usage_counter" not in st.session_state:
        st.session_state["usage_counter"] = UsageCounterTask()

    count = st.session_state["usage_counter"].result()
    if count is not None:
        st.sidebar.caption(f"Calculator used {int(count):,} times")


def main() -> None:
    st.title("🖨️ 3D Printing Calculator")
    st.caption("Version 1.5 · PHP-only · Saved on this device · Hover labels for English/Tagalog help")

    controller = _get_controller()

    page = st.sidebar.radio(
        "Navigate",
        [
            "Calculator",
            "Saved Computations",
        ],
    )

    if page == "Calculator":
        calculator.render(controller)
    elif page == "Saved Computations":
        saves.render(controller)

    _render_usage_counter()


if __name__ == "__main__":
    main()
