"""Resource cleanup for drivers, sessions and managers."""

import logging

import asyncio
import typing as t

logger = logging.getLogger(__name__)

_CLOSE_METHODS = ("close", "aclose", "cleanup")


class CleanupMixin:
    """Track resources and close them once, in reverse registration order."""

    def __init__(self) -> None:
        self._resources: list[t.Any] = []
        self._cleaned_up = False
        self._cleanup_lock: asyncio.Lock | None = None

    @property
    def cleaned_up(self) -> bool:
        return self._cleaned_up

    def register_resource(self, resource: t.Any) -> None:
        """Register a resource for cleanup."""
        if resource is not None and resource not in self._resources:
            self._resources.append(resource)

    async def cleanup_resource(self, resource: t.Any) -> None:
        """Close a single resource with the first close-like method it has."""
        for method_name in _CLOSE_METHODS:
            method = getattr(resource, method_name, None)
            if method is None:
                continue
            result = method()
            if asyncio.iscoroutine(result):
                await result
            logger.debug("Closed %r using %s()", resource, method_name)
            return

    async def _cleanup_resources(self) -> None:
        """Hook for subclasses to release state before registered resources close."""

    async def cleanup(self) -> None:
        """Clean up all registered resources."""
        if self._cleanup_lock is None:
            self._cleanup_lock = asyncio.Lock()

        async with self._cleanup_lock:
            if self._cleaned_up:
                return

            await self._cleanup_resources()

            errors = []
            for resource in reversed(self._resources):
                try:
                    await self.cleanup_resource(resource)
                except Exception as e:
                    errors.append(f"{resource!r}: {e}")

            self._resources.clear()
            self._cleaned_up = True

            if errors:
                logger.warning("Resource cleanup errors: %s", "; ".join(errors))

    async def __aenter__(self) -> t.Self:
        return self

    async def __aexit__(self, exc_type: t.Any, exc_val: t.Any, exc_tb: t.Any) -> None:
        await self.cleanup()
