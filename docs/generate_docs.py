"""
Regenerate the EvoNiche reference documents.

Usage:
    python docs/generate_docs.py [--api]

Writes the configuration reference (``docs/config_reference.md`` and the
repository ``CONFIG.md``) and a profile overview (``docs/profiles.md``).
With ``--api`` the package API is additionally rendered with pdoc into
``docs/site``.
"""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path

import yaml

from evoniche.utils.config_reference import write_markdown
from evoniche.utils.profiles import list_profiles

DOCS_DIR = Path(__file__).resolve().parent


def write_profiles(target: Path) -> Path:
    lines = ["# EvoNiche Profiles", ""]
    for name, overrides in list_profiles().items():
        lines += [f"## {name}", "", "```yaml", yaml.safe_dump(overrides, sort_keys=True).rstrip(), "```", ""]
    target.write_text("\n".join(lines), encoding="utf-8")
    return target


def build_api_docs(output_dir: Path) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    subprocess.run([sys.executable, "-m", "pdoc", "evoniche", "--output-dir", str(output_dir)], check=True)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--api", action="store_true", help="Also render API docs with pdoc.")
    args = parser.parse_args(argv)

    write_markdown(DOCS_DIR / "config_reference.md")
    write_markdown(DOCS_DIR.parent / "CONFIG.md")
    print(f"Wrote {write_profiles(DOCS_DIR / 'profiles.md')}")
    if args.api:
        try:
            build_api_docs(DOCS_DIR / "site")
        except subprocess.CalledProcessError:
            print("pdoc failed to run; skipping API docs build.")


if __name__ == "__main__":
    main()
