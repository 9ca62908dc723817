"""Generates the ``Endpoints`` enum from endpoint categories.

Each endpoint's identifier is derived from its URI: a leading ``/api/v1``
becomes ``OAUTH``, other known prefixes are dropped, a ``.json`` suffix is
removed, and the rest is upper-cased with path separators turned into
underscores. When two endpoints in one category share a URI, the HTTP verb is
appended to both (``GET /api/v1/me/prefs`` -> ``OAUTH_ME_PREFS_GET``).
"""

from collections.abc import Mapping, Sequence

from .endpoints import Endpoint
from .exceptions import ConfigurationError
from .log_config import logger

# Applied in order; each one sees the output of the previous.
PREFIX_SUBSTITUTIONS: tuple[tuple[str, str], ...] = (
    ("/api/v1", "OAUTH"),
    ("/api/", ""),
    ("/r/", ""),
    ("/", ""),
)
POSTFIX_SUBSTITUTIONS: tuple[tuple[str, str], ...] = ((".json", ""),)

INDENT = "    "
MODULE_HEADER = '''"""Reddit API endpoints, grouped by category."""

from enum import Enum


class Endpoints(Enum):
    """Reddit API endpoints, grouped by category."""
'''


def generate_enum_name(endpoint: Endpoint, is_duplicate: bool) -> str:
    """Derives the enum member name for ``endpoint``.

    Args:
        endpoint: The endpoint to name.
        is_duplicate: Whether another endpoint in the same category has the
            same URI. Duplicates get ``_<VERB>`` appended.
    """
    name = endpoint.uri

    for prefix, replacement in PREFIX_SUBSTITUTIONS:
        if name.startswith(prefix):
            name = replacement + name[len(prefix) :]

    for postfix, replacement in POSTFIX_SUBSTITUTIONS:
        if name.endswith(postfix):
            name = name[: -len(postfix)] + replacement

    name = (
        name.upper()
        .replace("/", "_")
        .replace("-", "_")
        .replace(".", "_")
        .replace("{", "")
        .replace("}", "")
    )

    if is_duplicate:
        name += f"_{endpoint.verb}"
    return name


def find_duplicate_uris(
    categories: Mapping[str, Sequence[Endpoint]],
) -> dict[str, list[str]]:
    """Returns, per category, the URIs that appear more than once, in first-seen order."""
    duplicates: dict[str, list[str]] = {}
    for category, endpoints in categories.items():
        seen: set[str] = set()
        dupes: dict[str, None] = {}
        for endpoint in endpoints:
            if endpoint.uri in seen:
                dupes[endpoint.uri] = None
            seen.add(endpoint.uri)
        duplicates[category] = list(dupes)
    return duplicates


def parse_categories(
    descriptors: Mapping[str, Sequence[str]],
) -> dict[str, list[Endpoint]]:
    """Turns ``{"category": ["GET /uri", ...]}`` into :class:`Endpoint` lists, sorted by category."""
    return {
        category: [Endpoint.parse(d, category=category) for d in descriptors[category]]
        for category in sorted(descriptors)
    }


def generate_names(
    categories: Mapping[str, Sequence[Endpoint]],
) -> dict[str, dict[str, Endpoint]]:
    """Names every endpoint, grouped by category.

    An endpoint listed twice in one category with the same verb is the same
    endpoint and is only emitted once.

    Raises:
        ConfigurationError: Two different endpoints end up with the same name.
    """
    duplicate_uris = find_duplicate_uris(categories)
    named: dict[str, Endpoint] = {}
    result: dict[str, dict[str, Endpoint]] = {}

    for category in sorted(categories):
        dupes = duplicate_uris[category]
        emitted: set[tuple[str, str]] = set()
        members: dict[str, Endpoint] = {}
        for endpoint in categories[category]:
            key = (endpoint.verb, endpoint.uri)
            if key in emitted:
                logger.debug(f"Skipping repeated endpoint {endpoint} in '{category}'")
                continue
            emitted.add(key)

            name = generate_enum_name(endpoint, endpoint.uri in dupes)
            if name in named:
                raise ConfigurationError(
                    f"Endpoints '{named[name]}' and '{endpoint}' both map to {name}"
                )
            named[name] = endpoint
            members[name] = endpoint
        result[category] = members
    return result


def render_endpoints_module(descriptors: Mapping[str, Sequence[str]]) -> str:
    """Renders Python source for the ``Endpoints`` enum."""
    lines = [MODULE_HEADER]
    for category, members in generate_names(parse_categories(descriptors)).items():
        lines.append(f"{INDENT}# --- {category} ---")
        for name, endpoint in members.items():
            lines.append(f'{INDENT}{name} = "{endpoint.request_descriptor}"')
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"
