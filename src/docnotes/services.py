# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Lazy keyed service registry."""

import logging
from typing import Any, ClassVar

logger = logging.getLogger(__name__)

PROTOTYPE = "prototype"
DEFAULT_CONTAINER = "default"


class UnregisteredServiceError(LookupError):
    """Represent a lookup of a service name that was never registered."""


class ServiceContainer:
    """Map service names to values that are initialized on first access.

    A registered value is resolved on access as follows:

    * ``(cls, PROTOTYPE)``: a new ``cls()`` on every access.
    * a class: instantiated once without arguments, the instance is kept.
    * any other callable: called once with the container, the result is kept.
    * anything else: returned unchanged.
    """

    _containers: ClassVar[dict[str, "ServiceContainer"]] = {}

    def __init__(self) -> None:
        self._services: dict[str, Any] = {}
        self._instances: dict[str, Any] = {}

    @classmethod
    def get_container(cls, name: str | None = DEFAULT_CONTAINER) -> "ServiceContainer":
        """Return the named container, creating it on first use.

        Args:
            name: Container name; empty or ``None`` selects the default container.

        Returns:
            The container registered under ``name``.
        """
        name = name or DEFAULT_CONTAINER
        container = cls._containers.get(name)
        if container is None:
            container = cls()
            cls._containers[name] = container
            logger.debug(f"Service container created (name={name})")
        return container

    @classmethod
    def reset_containers(cls) -> None:
        """Forget every named container."""
        cls._containers.clear()

    def register_service(self, name: str, value: Any) -> None:
        """Register a service value, class or factory under a name.

        Args:
            name: Service name; interface-like names avoid collisions.
            value: Service value, class, ``(class, PROTOTYPE)`` pair or factory
                taking the container.
        """
        self._services[name] = value
        self._instances.pop(name, None)

    def get_service(self, name: str) -> Any:
        """Return the service registered under a name, initializing it if needed.

        Raises:
            UnregisteredServiceError: If nothing is registered under ``name``.
        """
        if name not in self._services:
            raise UnregisteredServiceError(
                f'Service "{name}" was not registered in this ServiceContainer'
            )
        if name in self._instances:
            return self._instances[name]
        value = self._services[name]
        if _is_prototype(value):
            return value[0]()
        if isinstance(value, type):
            value = value()
        elif callable(value):
            value = value(self)
        self._instances[name] = value
        return value

    def unregister_service(self, name: str) -> None:
        """Remove a service; unknown names are ignored."""
        self._services.pop(name, None)
        self._instances.pop(name, None)

    def __getitem__(self, name: str) -> Any:
        return self.get_service(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.register_service(name, value)

    def __delitem__(self, name: str) -> None:
        self.unregister_service(name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._services.get(name) is not None


def _is_prototype(value: Any) -> bool:
    return (
        isinstance(value, (tuple, list))
        and len(value) == 2
        and isinstance(value[0], type)
        and value[1] == PROTOTYPE
    )
