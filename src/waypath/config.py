"""Router configuration.

Settings shared by route compilation and matching: the placeholder
fallback subpattern, the environ keys read for method and HTTPS
detection, and whether the map is sorted when the router compiles.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(secure_port=8443, sort_on_compile=True)
    """

    # Compilation
    default_subpattern: str = r"([^/]+)"  # Used for placeholders without a token

    # Request environment keys
    method_key: str = "REQUEST_METHOD"
    https_key: str = "HTTPS"
    port_key: str = "SERVER_PORT"
    secure_port: int = 443

    # Matching
    coerce_digits: bool = True  # "42" -> 42 for digit-only captures

    # Router.compile()
    sort_on_compile: bool = False
