"""Callback classification.

Decides which flow state the current page is in from the query and route
parameter maps. Query parameters are checked before route parameters and
``error`` before the success signal in each map.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from oauthflow.models.flow import (
    CodeCallback,
    ErrorCallback,
    FlowState,
    Fresh,
    TokenCallback,
)

logger = logging.getLogger(__name__)


def classify(query: Mapping[str, Any], route: Mapping[str, Any]) -> FlowState:
    """Classify one parameter snapshot. Pure and total."""
    if "error" in query:
        state: FlowState = ErrorCallback(dict(query))
    elif "code" in query:
        state = CodeCallback(query["code"])
    elif "error" in route:
        state = ErrorCallback(dict(route))
    elif "access_token" in route:
        state = TokenCallback(dict(route))
    else:
        state = Fresh()

    logger.debug(f"Classified navigation state as {type(state).__name__}")
    return state
