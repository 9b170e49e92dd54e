"""Ordered provider fallback.

Each upstream concern (geocoding, forecast) is served by a list of providers.
``first_success`` calls them in order, once each, and returns the first
result. Every failure is logged; when all fail the errors are folded into a
single ``NotFoundError`` (every provider found nothing) or ``UpstreamError``.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Protocol, Sequence, TypeVar

from .exceptions import NotFoundError, UpstreamError, WeatherServiceError

logger = logging.getLogger(__name__)

P = TypeVar("P", bound="Provider")
T = TypeVar("T")


class Provider(Protocol):
    @property
    def name(self) -> str:
        """Short label used in logs."""


async def first_success(
    providers: Sequence[P],
    call: Callable[[P], Awaitable[T]],
    label: str,
) -> T:
    if not providers:
        raise UpstreamError(f"No {label} providers configured")

    errors: list[tuple[str, WeatherServiceError]] = []
    for provider in providers:
        try:
            return await call(provider)
        except (NotFoundError, UpstreamError) as exc:
            logger.warning("%s via %s failed: %s", label, provider.name, exc)
            errors.append((provider.name, exc))

    last = errors[-1][1]
    if len(errors) == 1:
        raise last
    summary = "; ".join(f"{name}: {exc}" for name, exc in errors)
    if all(isinstance(exc, NotFoundError) for _, exc in errors):
        raise NotFoundError(f"{label} found no match ({summary})") from last
    raise UpstreamError(f"All {label} providers failed ({summary})") from last
