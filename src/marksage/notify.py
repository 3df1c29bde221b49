#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/notify.py
"""Push notifications about sync-conflict copies in a vault.

Notifications are delivered through an ntfy server: a plain ``POST`` to
``{server}/{topic}`` whose body is the message and whose headers carry the
title and priority.

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import httpx

from marksage.constants import DEFAULT_NOTIFY_TIMEOUT, DEFAULT_NTFY_URL, EXIT_ERROR, EXIT_SUCCESS
from marksage.exceptions import NotificationError
from marksage.vault import find_sync_conflicts

logger = logging.getLogger(__name__)


def topic_url(ntfy_url: str, topic: str) -> str:
    """Join the server url and topic name."""
    return f"{ntfy_url.rstrip('/')}/{topic.lstrip('/')}"


def send_notification(
    url: str,
    title: str,
    message: str,
    priority: str = "high",
    timeout: float = DEFAULT_NOTIFY_TIMEOUT,
    client: Optional[httpx.Client] = None,
) -> None:
    """Publish one message to an ntfy topic.

    Parameters
    ----------
    url : str
        Full topic url
    title : str
        Notification title
    message : str
        Notification body
    priority : str, default = "high"
        ntfy priority name
    timeout : float, default = 10.0
        Request timeout in seconds, used when no client is given
    client : httpx.Client, optional
        Client to send with; a short-lived one is created otherwise

    Raises
    ------
    NotificationError
        If the request fails or the server answers with an error status

    """
    headers = {"Title": title, "Priority": priority}
    owns_client = client is None
    http = client if client is not None else httpx.Client(timeout=timeout)
    try:
        response = http.post(url, content=message.encode("utf-8"), headers=headers)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise NotificationError(f"Failed to send notification: {e}", url=url, original_error=e) from e
    finally:
        if owns_client:
            http.close()


def notify_conflicts(
    vault: Path,
    topic: str,
    ntfy_url: str = DEFAULT_NTFY_URL,
    timeout: float = DEFAULT_NOTIFY_TIMEOUT,
    client: Optional[httpx.Client] = None,
) -> int:
    """Send a notification listing the vault's sync conflicts, if any.

    Nothing is sent when the vault has no conflicts.

    Parameters
    ----------
    vault : Path
        Root directory of the vault
    topic : str
        ntfy topic to publish to
    ntfy_url : str, default = "https://ntfy.sh"
        ntfy server url
    timeout : float, default = 10.0
        Request timeout in seconds
    client : httpx.Client, optional
        Client to send with

    Returns
    -------
    int
        0 when there was nothing to send or delivery succeeded, 1 otherwise

    """
    conflicts = find_sync_conflicts(vault)
    if not conflicts:
        logger.info("No sync conflicts found")
        return EXIT_SUCCESS

    title = f"{len(conflicts)} sync conflicts found"
    logger.info(title)
    try:
        send_notification(
            topic_url(ntfy_url, topic),
            title=title,
            message="\n".join(conflicts),
            timeout=timeout,
            client=client,
        )
    except NotificationError as e:
        logger.error(e.message)
        return EXIT_ERROR

    logger.info("Successfully sent notification")
    return EXIT_SUCCESS
