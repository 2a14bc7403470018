"""Cache key derivation for both caching strategies."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from graphql import DocumentNode

from proxyql.core.errors import DirectiveArgumentError
from proxyql.core.interfaces.key_modifier import IKeyModifier
from proxyql.core.interfaces.serializer import ISerializer
from proxyql.core.services.directive_analyzer import (
    CACHE_DIRECTIVE,
    get_directive_arguments,
)
from proxyql.utils.hashing import content_hash


@dataclass(frozen=True)
class DirectiveArguments:
    """Resolved @cache arguments: final store key and timeout in seconds."""

    id: str
    timeout: int


def calculate_arguments(
    document: DocumentNode,
    variables: Mapping[str, Any] | None,
    context: Any = None,
    key_modifier: IKeyModifier | None = None,
    default_timeout: int = 0,
    directive_name: str = CACHE_DIRECTIVE,
) -> DirectiveArguments:
    """Derive the cache key and timeout declared by the @cache directive.

    Args:
        document: The parsed query.
        variables: The request variables, used to resolve ``$var``
            arguments.
        context: Request context handed to ``key_modifier``.
        key_modifier: Optional hook rewriting the declared id.
        default_timeout: Timeout used when the directive omits one.
        directive_name: The directive name.

    Returns:
        The resolved arguments.

    Raises:
        DirectiveArgumentError: If the id is missing or the timeout is
            not a non-negative integer.
    """
    arguments = get_directive_arguments(document, variables, directive_name)

    raw_id = arguments.get("id")
    if raw_id is None or isinstance(raw_id, (bool, dict, list)) or raw_id == "":
        raise DirectiveArgumentError(
            f"@{directive_name} requires a non-empty id, got {raw_id!r}"
        )
    cache_id = str(raw_id)

    timeout = arguments.get("timeout")
    if timeout is None:
        timeout = default_timeout
    if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout < 0:
        raise DirectiveArgumentError(
            f"@{directive_name} timeout must be a non-negative integer, "
            f"got {timeout!r}"
        )

    if key_modifier is not None:
        try:
            cache_id = key_modifier(cache_id, context)
        except Exception as e:
            raise DirectiveArgumentError(f"Key modifier failed: {e}") from e
        if not isinstance(cache_id, str) or not cache_id:
            raise DirectiveArgumentError(
                f"Key modifier must return a non-empty string, got {cache_id!r}"
            )

    return DirectiveArguments(id=cache_id, timeout=timeout)


def hash_request_body(body: dict[str, Any], serializer: ISerializer) -> str:
    """Derive the content-address of a request body.

    Any difference in the serialized text, including key order, gives a
    different hash.

    Args:
        body: The parsed request body.
        serializer: Serializer producing the hashed text.

    Returns:
        The hexadecimal digest.

    Raises:
        SerializationError: If the body cannot be serialized.
    """
    return content_hash(serializer.serialize(body))
