"""Password gate and caller identity, persisted in the URL so refreshes keep them."""

import hashlib

import streamlit as st

from access_hub.config import COORDINATOR_ROLE, SessionKey, Settings
from access_hub.models import UserIdentity
from access_hub.utils import user_id_for_name

# Query params that survive a page refresh
AUTH_PARAM = "auth"
USER_PARAM = "user"


def hash_token(password: str) -> str:
    """Short, non-reversible token for the password, safe to keep in the URL."""
    return hashlib.sha256(password.encode()).hexdigest()[:12]


def _on_password_submit(app_password: str):
    entered = st.session_state.pop(SessionKey.PASSWORD_INPUT, "")
    accepted = entered == app_password
    st.session_state[SessionKey.PASSWORD_OK] = accepted
    if accepted:
        st.query_params[AUTH_PARAM] = hash_token(app_password)


def check_password(app_password: str) -> bool:
    """Render the password prompt until the shared app password is entered.

    An empty APP_PASSWORD disables the gate.
    """
    if not app_password or st.session_state.get(SessionKey.PASSWORD_OK):
        return True

    if st.query_params.get(AUTH_PARAM) == hash_token(app_password):
        st.session_state[SessionKey.PASSWORD_OK] = True
        return True

    st.title("Access Hub")
    st.caption("Communication, sign language and volunteer support")
    st.text_input(
        "Password",
        type="password",
        key=SessionKey.PASSWORD_INPUT,
        on_change=_on_password_submit,
        args=(app_password,),
    )
    if st.session_state.get(SessionKey.PASSWORD_OK) is False:
        st.error("Incorrect password")
    return False


def get_user_name() -> str | None:
    """Display name from session state, falling back to the URL."""
    name = st.session_state.get(SessionKey.CURRENT_USER_NAME) or st.query_params.get(USER_PARAM)
    if name:
        st.session_state[SessionKey.CURRENT_USER_NAME] = name
    return name or None


def set_user_name(name: str):
    st.session_state[SessionKey.CURRENT_USER_NAME] = name
    st.query_params[USER_PARAM] = name


def identity_for_name(name: str, settings: Settings) -> UserIdentity:
    """Build the caller identity for a display name."""
    roles = frozenset({COORDINATOR_ROLE}) if name.strip().lower() in settings.coordinator_names else frozenset()
    return UserIdentity(uid=user_id_for_name(name), name=name.strip(), roles=roles)


def current_user(settings: Settings) -> UserIdentity | None:
    """The signed-in caller, or None before a name has been chosen."""
    name = get_user_name()
    if not name or not name.strip():
        return None
    return identity_for_name(name, settings)


def logout():
    """Forget the password and the name, in session state and in the URL."""
    st.session_state[SessionKey.PASSWORD_OK] = None
    st.session_state[SessionKey.CURRENT_USER_NAME] = None
    for param in (AUTH_PARAM, USER_PARAM):
        if param in st.query_params:
            del st.query_params[param]
