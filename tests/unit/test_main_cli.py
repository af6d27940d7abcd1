from __future__ import annotations

import json

import pytest

from seqguard.guard import IncompleteSequenceError
from seqguard.main import main, parse_args


def test_run_subcommand_is_required() -> None:
    with pytest.raises(SystemExit):
        parse_args([])


@pytest.mark.asyncio
async def test_inline_run_prints_summary(capsys) -> None:
    summary = await main(["run", "--step-delay", "0.01"])
    assert summary["count"] == 3
    assert summary["mode"] == "inline"
    printed = json.loads(capsys.readouterr().out.strip())
    assert printed == summary


@pytest.mark.asyncio
async def test_inline_race_lost_is_fatal() -> None:
    with pytest.raises(IncompleteSequenceError):
        await main(["run", "--step-delay", "0.1", "--race-timeout", "0.15"])


@pytest.mark.asyncio
async def test_detached_race_lost_still_completes() -> None:
    summary = await main(
        ["run", "--step-delay", "0.1", "--race-timeout", "0.15", "--detached"]
    )
    assert summary["count"] == 3
    assert summary["mode"] == "detached"
    assert summary["handle_dropped"] is True


@pytest.mark.asyncio
async def test_config_file_supplies_delay(tmp_path) -> None:
    config = tmp_path / "config.yml"
    config.write_text("sequence:\n  step_delay: 0.01\n", encoding="utf-8")
    summary = await main(["run", "--config", str(config), "--race-timeout", "1.0"])
    assert summary["count"] == 3
    assert summary["handle_dropped"] is False
