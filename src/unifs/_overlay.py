"""Overlay resolution — apply configuration overwrites onto an endpoint."""

from __future__ import annotations

import dataclasses

from unifs._endpoint import Endpoint, parse_query


@dataclasses.dataclass(frozen=True)
class Overrides:
    """Optional overwrites; an empty string leaves the endpoint field untouched.

    :param username: Replaces ``Endpoint.username``.
    :param password: Replaces ``Endpoint.password``. Never rendered.
    :param path: Replaces ``Endpoint.path``.
    :param extras: Raw query string replacing ``Endpoint.extras`` as a whole.
    """

    username: str = ""
    password: str = dataclasses.field(default="", repr=False)
    path: str = ""
    extras: str = ""


def resolve(endpoint: Endpoint, overrides: Overrides) -> Endpoint:
    """Return *endpoint* with the non-empty *overrides* applied.

    Extras are replaced wholesale, never merged with the prior mapping.

    :raises ConfigError: If ``overrides.extras`` is not a valid query string.
    """
    changes: dict[str, object] = {}
    if overrides.path:
        changes["path"] = overrides.path
    if overrides.username:
        changes["username"] = overrides.username
    if overrides.password:
        changes["password"] = overrides.password
    if overrides.extras:
        changes["extras"] = parse_query(overrides.extras)
    if not changes:
        return endpoint
    return dataclasses.replace(endpoint, **changes)  # type: ignore[arg-type]
