"""Per-session cache for the account's user hash."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from catbox_client.config import ACCOUNT_URL, USER_HASH_LABEL
from catbox_client.extractor import (
    ByClass,
    Document,
    find_container,
    find_labeled_value,
    require_node,
)

if TYPE_CHECKING:
    from catbox_client.session import CatboxSession

logger = logging.getLogger(__name__)

USER_HASH_CONTAINER = ByClass("notesmall")


def parse_user_hash(html: str) -> str:
    """Read the user hash from the account management page.

    Raises:
        MissingContainerError: If the page has no ``notesmall`` block
        MissingLabelError: If the block does not print the user hash
    """
    doc = Document.parse(html)
    container = require_node(doc, find_container(doc, USER_HASH_CONTAINER))
    return find_labeled_value(doc, container, USER_HASH_LABEL)


class UserHashCache:
    """Fetches the user hash once and hands the same value to every caller.

    The first call to :meth:`get` starts a single fetch task; callers arriving
    while it runs await that same task. The outcome, value or exception, is
    kept for the lifetime of the session and never fetched again.
    """

    def __init__(self, session: CatboxSession) -> None:
        self._session = session
        self._task: asyncio.Task[str] | None = None

    @property
    def started(self) -> bool:
        """Whether the single fetch has been started."""
        return self._task is not None

    async def get(self) -> str:
        """Return the user hash, fetching it on first use.

        Raises:
            CatboxError: The failure of the single fetch, for every caller
        """
        if self._task is None:
            self._task = asyncio.ensure_future(self._fetch())
        # A cancelled caller must not cancel the fetch the others are awaiting
        return await asyncio.shield(self._task)

    async def _fetch(self) -> str:
        logger.debug(f"Fetching user hash from {ACCOUNT_URL}")
        html = await self._session.fetch_text(ACCOUNT_URL)
        user_hash = parse_user_hash(html)
        logger.debug("User hash resolved")
        return user_hash
