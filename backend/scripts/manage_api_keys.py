#!/usr/bin/env python3
"""Manage price provider API keys in the OS keychain.

Settings read TWELVEDATA_API_KEY and COINGECKO_API_KEY from the keychain
before the environment, so keys stored here never need to live in
``.env``.

Usage:
    python -m scripts.manage_api_keys import              # copy keys from backend/.env
    python -m scripts.manage_api_keys import --clean      # ...and strip them from .env
    python -m scripts.manage_api_keys delete TWELVEDATA_API_KEY
"""

import argparse
import re
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import dotenv_values

from services.credential_manager import (
    CREDENTIAL_KEYS,
    delete_credential,
    get_credential,
    set_credential,
)

DEFAULT_ENV_FILE = Path(__file__).parent.parent / ".env"


def import_from_env(env_path: Path, *, clean: bool = False) -> dict[str, list[str]]:
    """Store every non-empty API key found in ``env_path``.

    Returns:
        Dict with ``stored``, ``unchanged``, ``missing`` and ``failed``
        key lists.
    """
    if not env_path.exists():
        raise FileNotFoundError(f"No .env file found at {env_path}")

    values = dotenv_values(env_path)
    outcome: dict[str, list[str]] = {"stored": [], "unchanged": [], "missing": [], "failed": []}

    for key in sorted(CREDENTIAL_KEYS):
        value = values.get(key)
        if not value:
            outcome["missing"].append(key)
        elif get_credential(key) == value:
            outcome["unchanged"].append(key)
        elif set_credential(key, value):
            outcome["stored"].append(key)
        else:
            outcome["failed"].append(key)

    if clean:
        strip_keys_from_env(env_path, outcome["stored"] + outcome["unchanged"])
    return outcome


def strip_keys_from_env(env_path: Path, keys: list[str]) -> int:
    """Remove ``KEY=...`` lines for ``keys``; other lines are kept as-is.

    Returns:
        Number of lines removed.
    """
    if not keys:
        return 0
    pattern = re.compile(r"^(" + "|".join(re.escape(k) for k in keys) + r")\s*=")
    lines = env_path.read_text().splitlines(keepends=True)
    kept = [line for line in lines if not pattern.match(line)]
    env_path.write_text("".join(kept))
    return len(lines) - len(kept)


def main():
    parser = argparse.ArgumentParser(description="Manage provider API keys in the keychain")
    sub = parser.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Copy API keys from a .env file")
    imp.add_argument("--env-file", type=Path, default=DEFAULT_ENV_FILE)
    imp.add_argument("--clean", action="store_true", help="Remove imported keys from .env")

    rm = sub.add_parser("delete", help="Remove one API key from the keychain")
    rm.add_argument("key", choices=sorted(CREDENTIAL_KEYS))

    args = parser.parse_args()

    if args.command == "delete":
        ok = delete_credential(args.key)
        print(f"{args.key}: {'deleted' if ok else 'not found'}")
        sys.exit(0 if ok else 1)

    try:
        outcome = import_from_env(args.env_file, clean=args.clean)
    except FileNotFoundError as e:
        print(e)
        sys.exit(1)
    for label, keys in outcome.items():
        for key in keys:
            print(f"  {label:<9} {key}")
    sys.exit(1 if outcome["failed"] else 0)


if __name__ == "__main__":
    main()
