import streamlit as st

from printcalc.controller import NO_SAVES_MESSAGE, CalculatorController
from printcalc.csv_export import format_saved_at
from printcalc.models import MAX_SAVES
from printcalc.pricing import compute_breakdown
from printcalc.ui.common import flash, render_flash, render_pending_action
from printcalc.units import format_money


def _on_load(controller: CalculatorController, index: int) -> None:
    if controller.load(index):
        flash("success", f"Loaded: {controller.configuration.product_name}")
    else:
        flash("warning", "That save no longer exists (Wala na ang save na ito).")


def _on_delete(controller: CalculatorController, index: int) -> None:
    found, message = controller.request_delete(index)
    if not found:
        flash("warning", message)


def render(controller: CalculatorController) -> None:
    st.subheader("Saved computations")
    st.caption(f"Up to {MAX_SAVES} saves, newest first. Loading a save replaces the calculator fields.")

    render_flash()
    render_pending_action(controller)

    export = controller.export_all()
    if export is None:
        st.info(NO_SAVES_MESSAGE)
        return

    st.download_button(
        "Download all (.csv)",
        data=export.to_bytes(),
        file_name=export.filename,
        mime="text/csv",
    )

    for index, snapshot in enumerate(controller.saves):
        breakdown = compute_breakdown(snapshot.configuration)
        single = controller.export_one(index)
        with st.container(border=True):
            col1, col2, col3, col4, col5 = st.columns([3, 2, 1, 1, 1])
            col1.markdown(f"**{snapshot.name}**")
            col1.caption(f"Saved {format_saved_at(snapshot.saved_at)}")
            col2.metric("Final price", format_money(breakdown.final_price))
            col3.button("Load", key=f"load_save_{index}", on_click=_on_load, args=(controller, index))
            col4.download_button(
                "CSV",
                data=single.to_bytes(),
                file_name=single.filename,
                mime="text/csv",
                key=f"download_save_{index}",
            )
            col5.button("Delete", key=f"delete_save_{index}", on_click=_on_delete, args=(controller, index))
