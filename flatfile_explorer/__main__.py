#!/usr/bin/env python3
"""
Module entry point for `python -m flatfile_explorer`.
With file arguments it runs the headless CLI; otherwise it launches the Streamlit UI.
"""
from __future__ import annotations

import sys
from pathlib import Path


def main():
    if len(sys.argv) > 1:
        from flatfile_explorer.cli import main as cli_main
        sys.exit(cli_main(sys.argv[1:]))

    import os
    import subprocess

    if os.environ.get("FLATFILE_LAUNCHED") != "1":
        os.environ["FLATFILE_LAUNCHED"] = "1"
        # Compute the path to ui/app.py without importing it (streamlit runs it as a script)
        script_path = (Path(__file__).parent / "ui" / "app.py").resolve()
        cmd = [sys.executable, "-m", "streamlit", "run", str(script_path)]
        subprocess.run(cmd)
        return

    from flatfile_explorer.ui import app as app_mod
    app_mod.make_app()


if __name__ == "__main__":
    main()
