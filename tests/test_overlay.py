"""Tests for overlay resolution."""

from __future__ import annotations

import pytest

from unifs._endpoint import Endpoint
from unifs._errors import ConfigError
from unifs._overlay import Overrides, resolve

BASE = Endpoint(
    scheme="s3",
    hostname="bucket.example",
    port=9000,
    path="/prefix",
    username="user",
    password="pass",
    extras={"c": ["3"]},
)


class TestIdentity:
    @pytest.mark.parametrize(
        "endpoint",
        [BASE, Endpoint(), Endpoint(scheme="file", hostname=".", path="/x"), Endpoint(scheme="ftp", extras={})],
    )
    def test_empty_overrides_leave_endpoint_equal(self, endpoint: Endpoint) -> None:
        assert resolve(endpoint, Overrides()) == endpoint


class TestSingleField:
    def test_path(self) -> None:
        resolved = resolve(BASE, Overrides(path="/other"))
        assert resolved.path == "/other"
        assert resolved == Endpoint(**{**BASE.__dict__, "path": "/other"})

    def test_username(self) -> None:
        resolved = resolve(BASE, Overrides(username="alice"))
        assert resolved.username == "alice"
        assert resolved.password == "pass"
        assert resolved.path == BASE.path
        assert resolved.extras == BASE.extras

    def test_password(self) -> None:
        resolved = resolve(BASE, Overrides(password="s3cret"))
        assert resolved.password == "s3cret"
        assert resolved.username == "user"
        assert resolved.hostname == BASE.hostname

    def test_path_is_verbatim(self) -> None:
        assert resolve(BASE, Overrides(path="relative//odd/")).path == "relative//odd/"


class TestExtras:
    def test_replaces_whole_mapping(self) -> None:
        resolved = resolve(BASE, Overrides(extras="a=1&b=2"))
        assert resolved.extras == {"a": ["1"], "b": ["2"]}
        assert "c" not in resolved.extras

    def test_invalid_raises_config_error(self) -> None:
        with pytest.raises(ConfigError):
            resolve(BASE, Overrides(extras="a=%zz"))

    def test_invalid_leaves_input_untouched(self) -> None:
        before = Endpoint(**BASE.__dict__)
        with pytest.raises(ConfigError):
            resolve(BASE, Overrides(path="/changed", extras="a=1;b=2"))
        assert BASE == before
        assert BASE.extras == {"c": ["3"]}


class TestOverrides:
    def test_repr_hides_password(self) -> None:
        assert "hunter2" not in repr(Overrides(password="hunter2"))

    def test_all_fields_together(self) -> None:
        resolved = resolve(BASE, Overrides(username="u", password="p", path="/q", extras="z=9"))
        assert (resolved.username, resolved.password, resolved.path) == ("u", "p", "/q")
        assert resolved.extras == {"z": ["9"]}
        assert resolved.scheme == "s3"
        assert resolved.port == 9000
