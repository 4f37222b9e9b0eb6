import pandas as pd
import streamlit as st

TAGLINE = "Play logic games & sharpen your mind."


def _summarize(state) -> str:
    if isinstance(state, dict):
        return ", ".join(f"{k}: {'-' if v is None else v}" for k, v in state.items())
    return "-" if state is None else str(state)


def progress_table(registry, persistence) -> pd.DataFrame:
    """One row per registered game that has saved progress in the current namespace."""
    saved = set(persistence.saved_games())
    rows = [
        {"id": d.id, "Game": d.title, "Progress": _summarize(persistence.load(d.id))}
        for d in registry.list()
        if d.id in saved
    ]
    return pd.DataFrame(rows, columns=["id", "Game", "Progress"])


def render_home(container, registry, persistence):
    with container:
        st.title("🧩 MiniLogicPlay")
        st.markdown(TAGLINE)
        st.markdown("Pick a game in the sidebar. Your progress is saved under your player name.")

        for descriptor in registry.list():
            st.markdown(f"- **{descriptor.title}**: {descriptor.description}")

        st.subheader(f"Saved progress for `{persistence.resolve_namespace()}`")
        df = progress_table(registry, persistence)
        if df.empty:
            st.caption("No saved progress yet.")
        else:
            st.dataframe(df[["Game", "Progress"]], hide_index=True, use_container_width=True)
            clear_cols = st.columns(len(df))
            for col, row in zip(clear_cols, df.itertuples()):
                col.button(
                    f"Clear {row.Game}",
                    key=f"clear-{row.id}",
                    on_click=persistence.reset,
                    args=(row.id,),
                )
