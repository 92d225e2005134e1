"""
Router config file lookup and the init command
"""

from pathlib import Path
from typing import List, Optional

from platformdirs import user_config_dir

from .config_template import MINIMAL_CONFIG_TEMPLATE

CONFIG_FILENAME = 'router_config.yaml'


def config_search_paths() -> List[Path]:
    """Locations checked for a config file when none is given, in priority order"""
    return [
        Path(CONFIG_FILENAME).resolve(),
        Path(user_config_dir('wire_router', appauthor=False)) / 'config.yaml',
    ]


def discover_config(explicit_path: Optional[str] = None) -> Optional[Path]:
    """
    Find the config file to load

    An explicit path must exist. Otherwise the first existing entry of
    config_search_paths() wins, and None means routing runs on defaults.

    Raises:
        FileNotFoundError: If the explicit path doesn't exist
    """
    if explicit_path:
        path = Path(explicit_path).resolve()
        if not path.exists():
            raise FileNotFoundError(f"Config not found: {explicit_path}")
        return path

    for candidate in config_search_paths():
        if candidate.exists():
            return candidate
    return None


def run_init_command(force: bool = False, path: Optional[str] = None) -> int:
    """
    Write the documented default config

    Returns:
        Exit code (0 = success, 1 = error)
    """
    config_path = Path(path or CONFIG_FILENAME).resolve()

    if config_path.exists() and not force:
        print(f"❌ Config already exists: {config_path}")
        print("   Use --force to overwrite")
        return 1

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(MINIMAL_CONFIG_TEMPLATE, encoding='utf-8')
    except OSError as e:
        print(f"❌ Failed to write config file: {config_path}")
        print(f"   Error: {e}")
        return 1

    print(f"✅ Config created: {config_path}")
    print(f"   Adjust grid size and penalties, then run: wire-router run layout.yaml --config {config_path}")
    return 0
