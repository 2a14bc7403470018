"""Domain services for proxyql."""

from proxyql.core.services.directive_analyzer import (
    CACHE_DIRECTIVE,
    CACHE_DIRECTIVE_SDL,
    find_directive,
    get_cache_directive_sdl,
    get_directive_arguments,
    has_directive,
    parse_query,
    print_query,
    remove_directive,
)
from proxyql.core.services.directive_phase import DirectivePhase
from proxyql.core.services.error_policy import ErrorPolicy
from proxyql.core.services.hash_phase import (
    LAST_REQUESTED_FIELD,
    REQUEST_FIELD,
    RESPONSE_FIELD,
    HashPhase,
)
from proxyql.core.services.key_derivation import (
    DirectiveArguments,
    calculate_arguments,
    hash_request_body,
)
from proxyql.core.services.proxy_cache import ProxyCache
from proxyql.core.services.response_interceptor import ResponseInterceptor

__all__ = [
    "ProxyCache",
    # Phases
    "DirectivePhase",
    "HashPhase",
    "ResponseInterceptor",
    "ErrorPolicy",
    # Directive analysis
    "CACHE_DIRECTIVE",
    "CACHE_DIRECTIVE_SDL",
    "get_cache_directive_sdl",
    "parse_query",
    "print_query",
    "find_directive",
    "has_directive",
    "remove_directive",
    "get_directive_arguments",
    # Key derivation
    "DirectiveArguments",
    "calculate_arguments",
    "hash_request_body",
    # Hash record fields
    "LAST_REQUESTED_FIELD",
    "REQUEST_FIELD",
    "RESPONSE_FIELD",
]
