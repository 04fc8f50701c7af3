"""Authorization endpoint URL construction.

The query string is assembled by hand rather than with ``urlencode``:
field order is fixed and only ``redirect_uri`` is percent-encoded.
"""

from __future__ import annotations

from urllib.parse import quote

from oauthflow.models.config import ResolvedConfig


def build_authorize_url(config: ResolvedConfig) -> str:
    """Build the URL the browser is sent to when the flow starts.

    Order: response_type, client_id, [redirect_uri], [scope], then the
    configured extra params in insertion order.

    Args:
        config: Resolved provider configuration

    Returns:
        Complete authorization URL
    """
    authorize = config.authorize

    url = (
        f"{config.authorize_url_base}"
        f"?response_type={authorize.response_type.value}"
        f"&client_id={config.client_id}"
    )

    if authorize.redirect_uri:
        url += f"&redirect_uri={quote(authorize.redirect_uri, safe='')}"
    if authorize.scope:
        url += f"&scope={authorize.scope}"

    for key, value in authorize.params:
        url += f"&{key}={value}"

    return url
