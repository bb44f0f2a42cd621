"""Generate a pass key environment line for card freezer."""

from __future__ import annotations

import argparse
from pathlib import Path

from card_freezer.core.config import DEFAULT_PASS_KEY_ENV
from card_freezer.core.crypto import generate_pass_key


def _render_line(name: str, value: str, env_format: str) -> str:
    if env_format == "powershell":
        return f"$env:{name}='{value}'"
    if env_format == "shell-export":
        return f"export {name}='{value}'"
    return f"{name}='{value}'"


def main() -> None:
    """Generate a pass key and optionally write/print the env line."""
    parser = argparse.ArgumentParser(description="Generate a card freezer pass key.")
    parser.add_argument(
        "--write-env",
        default=None,
        help="Path to write the generated key. Omit to skip file output.",
    )
    parser.add_argument(
        "--format",
        choices=["shell", "shell-export", "powershell"],
        default="shell",
        help="Output format for written/printed lines.",
    )
    parser.add_argument(
        "--name",
        default=DEFAULT_PASS_KEY_ENV,
        help="Environment variable name for the key.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite existing env file.",
    )
    args = parser.parse_args()

    line = _render_line(args.name, generate_pass_key(), args.format)

    if args.write_env:
        target_path = Path(args.write_env)
        if target_path.exists() and not args.force:
            print(f"[INFO] key file already exists: {target_path}")
            return
        target_path.parent.mkdir(parents=True, exist_ok=True)
        target_path.write_text(line + "\n", encoding="utf-8")
        print(f"[INFO] key file written: {target_path}")
    else:
        print(line)


if __name__ == "__main__":
    main()
