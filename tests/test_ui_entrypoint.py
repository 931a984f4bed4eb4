from __future__ import annotations

from pathlib import Path

import s2m.ui.app as ui_app


def test_ui_app_delegates_to_streamlit_app(monkeypatch):
    called = {}

    def _fake_run_path(path, run_name=None):
        called["path"] = path
        called["run_name"] = run_name
        return {}

    monkeypatch.setattr(ui_app.runpy, "run_path", _fake_run_path)

    ui_app.main()

    assert called["run_name"] == "__main__"

    app_path = Path(called["path"]).resolve()
    assert app_path.name == "app.py"
    assert app_path.parent.name == "s2m"
