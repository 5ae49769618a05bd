"""Streamlit helpers shared by the app's tabs."""

import streamlit as st

from access_hub.errors import AccessHubError


def run_action(action, success: str = None):
    """Run a store or AI call, showing AccessHubError messages instead of a traceback.

    Returns the action's result, or None when it failed.
    """
    try:
        result = action()
    except AccessHubError as e:
        st.error(str(e))
        return None
    if success:
        st.toast(success)
    return result


def run_and_rerun(action, success: str = None):
    """Run an action and rerun the page only if it succeeded.

    A failed action keeps the page as is so its error message stays visible.
    """
    result = run_action(action, success)
    if result:
        st.rerun()
    return result
