"""Checks on the installed distribution metadata."""

import re
from importlib.metadata import requires


def _requirement(name: str) -> str:
    for req in requires("weaviate-hub") or []:
        if re.match(rf"{name}\b(?!-)", req) and "extra ==" not in req:
            return req
    raise AssertionError(f"{name} not declared")


class TestDependencies:
    """Runtime requirements pinned to compatible majors."""

    def test_mcp_capped_below_2(self) -> None:
        req = _requirement("mcp")
        assert ">=1.2" in req
        assert "<2" in req
