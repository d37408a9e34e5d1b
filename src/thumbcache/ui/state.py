"""Session state for the preview app.

The last thumbnail bytes and error image survive Streamlit
reruns here, always under a ``StateKey``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import streamlit as st


class StateKey(str, Enum):
    """Keys of the values kept across reruns."""

    THUMBNAIL = "thumbnail"
    ERROR_IMAGE = "error_image"


@dataclass(frozen=True)
class ControlDefaults:
    """Default values for the transform controls."""

    width: int = 200
    height: int = 0
    brightness: float = 0.0
    contrast: float = 0.0


CONTROL_DEFAULTS = ControlDefaults()


def get_state(key: StateKey, default=None):
    """Return the value stored under *key*, or *default*."""
    return st.session_state.get(key.value, default)


def set_state(key: StateKey, value) -> None:
    """Store a value in session state."""
    st.session_state[key.value] = value


def clear_result_state() -> None:
    """Remove the last thumbnail and error image from session state.

    Called before every run so a failure never shows a stale thumbnail.
    """
    for key in (StateKey.THUMBNAIL, StateKey.ERROR_IMAGE):
        st.session_state.pop(key.value, None)
