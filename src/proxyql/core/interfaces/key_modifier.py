"""Key modifier interface."""

from typing import Any, Protocol


class IKeyModifier(Protocol):
    """Hook that rewrites a directive cache id into the final store key.

    Typically used to namespace keys per tenant or per user, e.g.::

        def per_user(cache_id: str, context: Request) -> str:
            return f"{context.headers['x-user-id']}:{cache_id}"

    Must be pure: the same id and context always give the same key.
    """

    def __call__(self, cache_id: str, context: Any) -> str:
        """Build the final key.

        Args:
            cache_id: The id declared in the @cache directive.
            context: The request context (the transport's request object).

        Returns:
            The key used for both lookup and write.
        """
        ...
