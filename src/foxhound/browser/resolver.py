from __future__ import annotations

import logging
from typing import Protocol, Sequence

from playwright.async_api import Locator

from ..errors import ElementLookupError, ElementNotFound
from ..types import LocatorCandidate

logger = logging.getLogger(__name__)


class ElementFinder(Protocol):
    async def find_element(self, selector: str) -> Locator: ...


async def resolve_element(candidates: Sequence[LocatorCandidate], session: ElementFinder) -> Locator:
    """Return the live element matched by the highest-priority candidate.

    Candidates are tried one at a time; a failed lookup only advances to the
    next candidate.
    """

    last_error: ElementLookupError | None = None
    for candidate in sorted(candidates, key=lambda item: item.priority):
        logger.debug("Trying locator %s", candidate.selector, extra={"kind": candidate.kind})
        try:
            element = await session.find_element(candidate.selector)
        except ElementLookupError as exc:
            last_error = exc
            continue
        logger.info("Resolved element via %s locator", candidate.kind, extra={"selector": candidate.selector})
        return element

    detail = last_error.message if last_error is not None else "no locator candidates"
    raise ElementNotFound(f"No matching element found on the page: {detail}", last_error=last_error)
