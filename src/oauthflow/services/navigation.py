"""Navigation sinks used to start the flow."""

from __future__ import annotations

import logging
import webbrowser
from typing import Protocol

logger = logging.getLogger(__name__)


class NavigationSink(Protocol):
    """Write-only slot for the page location.

    Writing it is the redirect that starts the flow.
    """

    def navigate(self, url: str) -> None: ...


class BrowserNavigator:
    """Navigation sink that opens the URL in the user's browser."""

    def __init__(self, new_tab: bool = False):
        self.new_tab = new_tab

    def navigate(self, url: str) -> None:
        logger.info("Opening authorization page in browser")
        if self.new_tab:
            opened = webbrowser.open_new_tab(url)
        else:
            opened = webbrowser.open(url)
        if not opened:
            logger.warning(f"Could not open a browser, visit {url} manually")


class RecordingNavigator:
    """Navigation sink that only remembers where it was sent.

    For hosts that perform the navigation themselves (a web framework
    returning a redirect response, for example).
    """

    def __init__(self) -> None:
        self.location: str | None = None

    def navigate(self, url: str) -> None:
        self.location = url
