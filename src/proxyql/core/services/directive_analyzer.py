"""Analyzer for the @cache directive in GraphQL operations.

The directive is declared by the client inside the query and is only
understood by the proxy, never by the upstream server::

    query Products($page: Int) @cache(id: "products", timeout: 60) {
      products(page: $page) { id name }
    }

Arguments may be literals or variable references resolved against the
request's variables.
"""

from collections.abc import Mapping
from typing import Any

from graphql import DirectiveNode, DocumentNode, GraphQLError, parse, print_ast
from graphql.language import BREAK, REMOVE, Visitor, visit
from graphql.pyutils import Undefined
from graphql.utilities import value_from_ast_untyped

from proxyql.core.errors import DirectiveParseError

CACHE_DIRECTIVE = "cache"

# SDL to add to an upstream schema that wants to validate the directive itself
CACHE_DIRECTIVE_SDL = '''
"""Serve this operation from the proxy cache."""
directive @cache(
  """Cache id of the operation result."""
  id: String!
  """Expiry in seconds."""
  timeout: Int
) on QUERY
'''


class _DirectiveFinder(Visitor):
    """Stops at the first occurrence of a named directive."""

    def __init__(self, name: str) -> None:
        super().__init__()
        self.name = name
        self.found: DirectiveNode | None = None

    def enter_directive(self, node: DirectiveNode, *_args: Any) -> Any:
        if node.name.value == self.name:
            self.found = node
            return BREAK
        return None


class _DirectiveRemover(Visitor):
    def __init__(self, name: str) -> None:
        super().__init__()
        self.name = name

    def enter_directive(self, node: DirectiveNode, *_args: Any) -> Any:
        if node.name.value == self.name:
            return REMOVE
        return None


def parse_query(query: str) -> DocumentNode:
    """Parse query text into a document.

    Args:
        query: The GraphQL query text.

    Returns:
        The parsed document.

    Raises:
        DirectiveParseError: If the text is not valid GraphQL.
    """
    try:
        return parse(query)
    except GraphQLError as e:
        raise DirectiveParseError(f"Failed to parse query: {e.message}") from e


def print_query(document: DocumentNode) -> str:
    """Print a document back to query text."""
    return print_ast(document)


def find_directive(name: str, document: DocumentNode) -> DirectiveNode | None:
    """Find the first occurrence of a directive anywhere in a document.

    Args:
        name: The directive name, without ``@``.
        document: The parsed document.

    Returns:
        The directive node, or None if absent.
    """
    finder = _DirectiveFinder(name)
    visit(document, finder)
    return finder.found


def has_directive(name: str, document: DocumentNode) -> bool:
    """Check if a directive occurs anywhere in a document."""
    return find_directive(name, document) is not None


def remove_directive(
    document: DocumentNode,
    name: str = CACHE_DIRECTIVE,
) -> DocumentNode:
    """Remove every occurrence of a directive.

    The input document is left untouched; the rest of the tree is
    preserved structurally.

    Args:
        document: The parsed document.
        name: The directive name to remove.

    Returns:
        A new document without the directive.
    """
    return visit(document, _DirectiveRemover(name))


def get_directive_arguments(
    document: DocumentNode,
    variables: Mapping[str, Any] | None,
    name: str = CACHE_DIRECTIVE,
) -> dict[str, Any]:
    """Extract the arguments of the first occurrence of a directive.

    Variable references are resolved from ``variables``. Arguments
    referencing an undefined variable are left out.

    Args:
        document: The parsed document.
        variables: The request variables.
        name: The directive name.

    Returns:
        Mapping of argument name to Python value. Empty if the
        directive is absent.
    """
    directive = find_directive(name, document)
    if directive is None:
        return {}

    arguments: dict[str, Any] = {}
    for argument in directive.arguments or ():
        value = value_from_ast_untyped(argument.value, dict(variables or {}))
        if value is not Undefined:
            arguments[argument.name.value] = value
    return arguments


def get_cache_directive_sdl() -> str:
    """Get the SDL definition for the @cache directive.

    Returns:
        The SDL string for the directive definition.
    """
    return CACHE_DIRECTIVE_SDL
