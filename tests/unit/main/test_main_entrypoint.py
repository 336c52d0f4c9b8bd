from __future__ import annotations

import runpy


def test_main_module_runs_uvicorn(monkeypatch):
    executed = {}

    def fake_run(app: str, **kwargs) -> None:
        executed["app"] = app
        executed.update(kwargs)

    monkeypatch.setenv("SERVICE_PORT", "9100")
    monkeypatch.setattr("uvicorn.run", fake_run)

    runpy.run_module("homegraph.main.__main__", run_name="__main__")

    assert executed["app"] == "homegraph.main.app:app"
    assert executed["port"] == 9100
    assert executed["reload"] is False
