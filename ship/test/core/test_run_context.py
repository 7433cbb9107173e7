from __future__ import annotations

import pytest

from ship.core.result import Err, Ok
from ship.core.run_context import RunContext, resolve_run_id, validate_run_id


def test_image_ref() -> None:
    ctx = RunContext(run_id="1042", namespace="pets", login_server="storeacr.azurecr.io")
    assert ctx.image_ref("store-front", "1042") == "storeacr.azurecr.io/store-front:1042"


class TestValidateRunId:
    @pytest.mark.parametrize("value", ["1042", "20261018.3", "run-abc_1", "_x"])
    def test_valid(self, value: str) -> None:
        assert validate_run_id(value) == Ok(value)

    def test_strips_whitespace(self) -> None:
        assert validate_run_id(" 7\n") == Ok("7")

    @pytest.mark.parametrize("value", ["", "-1", "a/b", "x" * 129, "has space"])
    def test_invalid_tag(self, value: str) -> None:
        result = validate_run_id(value)
        assert isinstance(result, Err)
        assert "not a valid image tag" in result.error.message

    def test_floating_tag_is_reserved(self) -> None:
        result = validate_run_id("latest")
        assert isinstance(result, Err)
        assert "reserved" in result.error.reason


class TestResolveRunId:
    def test_explicit_wins(self) -> None:
        assert resolve_run_id("9", environ={"SHIP_RUN_ID": "1"}) == Ok("9")

    def test_env_order(self) -> None:
        env = {"SHIP_RUN_ID": "1", "BUILD_BUILDID": "2"}
        assert resolve_run_id(None, environ=env) == Ok("1")
        assert resolve_run_id(None, environ={"BUILD_BUILDID": "2"}) == Ok("2")

    def test_blank_env_is_ignored(self) -> None:
        assert resolve_run_id(None, environ={"SHIP_RUN_ID": " ", "BUILD_BUILDID": "3"}) == Ok("3")

    def test_generated_ids_are_unique(self) -> None:
        first = resolve_run_id(None, environ={})
        second = resolve_run_id(None, environ={})
        assert isinstance(first, Ok) and isinstance(second, Ok)
        assert first.value.startswith("run-")
        assert first.value != second.value
        assert validate_run_id(first.value) == first

    def test_invalid_env_value_is_an_error(self) -> None:
        assert isinstance(resolve_run_id(None, environ={"SHIP_RUN_ID": "latest"}), Err)
