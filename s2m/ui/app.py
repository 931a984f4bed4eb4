"""Streamlit UI entrypoint.

``streamlit run s2m/ui/app.py`` and ``s2m-ui`` both land here; the page itself
lives in ``s2m/app.py`` and is executed as ``__main__``.
"""

from __future__ import annotations

import runpy
import sys
from pathlib import Path

APP_PATH = Path(__file__).resolve().parents[1] / "app.py"


def main() -> None:
    runpy.run_path(str(APP_PATH), run_name="__main__")


def launch() -> None:
    """Console-script entrypoint: start a Streamlit server on the app."""
    from streamlit.web import cli as stcli

    sys.argv = ["streamlit", "run", str(APP_PATH), *sys.argv[1:]]
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
