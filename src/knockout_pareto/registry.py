"""Name lookup for parent selection strategies.

A run names its parent selection ("uniform", "crowded") so that it can come
from a config file:

    ```python
    from knockout_pareto.registry import SelectionRegistry, list_selections

    selector = SelectionRegistry.get("crowded", tournament_size=3)
    available = list_selections()  # ["crowded", "uniform"]
    ```

The built-in names are registered on import of ``knockout_pareto.selection``.
"""

from collections.abc import Callable

from knockout_pareto.protocols import ParentSelector


class SelectionRegistry:
    """Class-level map from strategy name to selector factory.

    Factories take keyword options and return a ParentSelector, so options
    such as the tournament size are bound when the selector is fetched.
    """

    _registry: dict[str, Callable[..., ParentSelector]] = {}

    @classmethod
    def register(cls, name: str, factory: Callable[..., ParentSelector]) -> None:
        """Store ``factory`` under ``name``, replacing any earlier entry."""
        cls._registry[name] = factory

    @classmethod
    def get(cls, name: str, **kwargs) -> ParentSelector:
        """Build the selector registered as ``name``.

        Args:
            name: Registered strategy name.
            **kwargs: Options forwarded to the factory.

        Raises:
            KeyError: If nothing is registered under ``name``. The message
                lists the registered names.
        """
        try:
            factory = cls._registry[name]
        except KeyError:
            available = ", ".join(cls.list()) or "none"
            raise KeyError(f"Selection strategy '{name}' not found. Available strategies: {available}") from None
        return factory(**kwargs)

    @classmethod
    def list(cls) -> list[str]:
        return sorted(cls._registry)


def list_selections() -> list[str]:
    """Names of all registered parent selection strategies."""
    return SelectionRegistry.list()
