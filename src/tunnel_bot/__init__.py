"""tunnel-bot: control a tunneling agent from a Telegram chat."""

import tomllib
from pathlib import Path

try:
    # Prefer pyproject.toml so development checkouts report the working version
    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    with open(pyproject_path, "rb") as f:
        data = tomllib.load(f)
    __version__ = data["project"]["version"]
except Exception:
    # Installed (non-editable) package: read from metadata
    try:
        from importlib.metadata import version

        __version__ = version("tunnel-bot")
    except Exception:
        __version__ = "0.0.0-dev"
