#!/usr/bin/env python3
import os
import re
import sys
from pathlib import Path
from typing import List, Optional

VERSION_FILES = {
    'pyproject.toml': r'^version = "([^"]+)"',
    'cacheiam/__init__.py': r'^__version__ = "([^"]+)"',
}


def bump_version(current: str, bump_type: str) -> str:
    major, minor, patch = map(int, current.split('.'))
    if bump_type == 'major':
        return f"{major + 1}.0.0"
    elif bump_type == 'minor':
        return f"{major}.{minor + 1}.0"
    elif bump_type == 'patch':
        return f"{major}.{minor}.{patch + 1}"
    else:
        raise ValueError(f"Invalid bump type: {bump_type}")


def read_version(path: Path, pattern: str) -> str:
    match = re.search(pattern, path.read_text(), re.MULTILINE)
    if not match:
        raise ValueError(f"Could not find version in {path}")
    return match.group(1)


def write_version(path: Path, pattern: str, new_version: str) -> None:
    content = path.read_text()
    # The pattern's group wraps the version digits inside the quotes.
    prefix = pattern.split('(')[0].lstrip('^')
    new_content = re.sub(pattern, f'{prefix}{new_version}"', content, count=1, flags=re.MULTILINE)
    path.write_text(new_content)


def main(argv: Optional[List[str]] = None, root: Optional[Path] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    root = root or Path.cwd()
    if len(argv) != 1:
        print("Usage: bump_version.py <major|minor|patch>", file=sys.stderr)
        return 1

    try:
        versions = {name: read_version(root / name, pattern) for name, pattern in VERSION_FILES.items()}
        current_version = versions['pyproject.toml']
        if len(set(versions.values())) != 1:
            raise ValueError(f"Version mismatch between files: {versions}")
        new_version = bump_version(current_version, argv[0])
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for name, pattern in VERSION_FILES.items():
        write_version(root / name, pattern, new_version)

    # Output for GitHub Actions
    github_output = os.environ.get('GITHUB_OUTPUT')
    if github_output:
        with open(github_output, 'a') as f:
            f.write(f"current_version={current_version}\n")
            f.write(f"new_version={new_version}\n")
    else:
        print(f"Bumped version: {current_version} -> {new_version}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
