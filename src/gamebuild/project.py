"""
Project marker and local project scaffolding.

``gamebuild game init`` links the working directory to a remote game by
writing ``.gamebuild.json``. Build and deploy commands read it back to
know which game they act on, and the build command collects the files
it will upload from the same directory.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from . import PROJECT_FILE
from .models import ProjectMarker

logger = logging.getLogger(__name__)

PROJECT_DIRS = ("src", "assets", "dist")
SOURCE_DIRS = ("src", "assets")
ROOT_FILES = ("package.json", "index.html", "README.md")
EXCLUDE_PARTS = ("node_modules", ".git", "dist", "build", ".DS_Store", "Thumbs.db", PROJECT_FILE)

STARTER_FILES: dict[str, str] = {
    "src/index.js": """// GameBuild Project Entry Point
console.log('Welcome to GameBuild!');

// Your game code goes here
function startGame() {
    console.log('Game started!');
}

startGame();
""",
    "assets/README.md": """# Assets Directory

Place your game assets here:
- Images (PNG, JPG, SVG)
- Audio files (MP3, WAV, OGG)
- Fonts (TTF, OTF, WOFF)
- Other resources

## Organization
- `images/` - Sprites, backgrounds, UI elements
- `audio/` - Sound effects and music
- `fonts/` - Custom fonts
- `data/` - JSON files, configs, levels
""",
    ".gitignore": """# Dependencies
node_modules/

# Build outputs
dist/
build/
*.tgz

# Environment files
.env
.env.local

# GameBuild
.gamebuild.json
.gamebuild/

# IDE
.vscode/
.idea/
*.swp

# OS
.DS_Store
Thumbs.db
""",
}


def marker_path(root: Optional[Path] = None) -> Path:
    """Path of the project marker in ``root`` (default: cwd)."""
    return (root or Path.cwd()) / PROJECT_FILE


def load_project(root: Optional[Path] = None) -> Optional[ProjectMarker]:
    """Read the project marker.

    Args:
        root: Project directory. Defaults to the current directory.

    Returns:
        The marker, or None if absent or unreadable.
    """
    path = marker_path(root)
    if not path.exists():
        return None
    try:
        return ProjectMarker(**json.loads(path.read_text(encoding="utf-8")))
    except (json.JSONDecodeError, OSError, TypeError, ValidationError) as exc:
        logger.warning("Ignoring unreadable project file %s: %s", path, exc)
        return None


def write_project(game_id: str, root: Optional[Path] = None, platform: str = "web") -> ProjectMarker:
    """Write a fresh marker, replacing any existing one."""
    marker = ProjectMarker(gameId=game_id, platform=platform)
    path = marker_path(root)
    path.write_text(
        json.dumps(marker.model_dump(mode="json"), indent=2), encoding="utf-8",
    )
    logger.info("Linked %s to game %s", path.parent, game_id)
    return marker


def scaffold_project(root: Optional[Path] = None) -> list[Path]:
    """Create the standard directories and starter files.

    Existing files are never overwritten.

    Returns:
        The files that were created.
    """
    base = root or Path.cwd()
    for name in PROJECT_DIRS:
        (base / name).mkdir(parents=True, exist_ok=True)

    created = []
    for rel, content in STARTER_FILES.items():
        target = base / rel
        if target.exists():
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        created.append(target)
    return created


def _excluded(rel: Path) -> bool:
    return any(part in EXCLUDE_PARTS for part in rel.parts)


def collect_project_files(root: Optional[Path] = None) -> list[str]:
    """List the files a build uploads, relative to the project root.

    Walks ``src/`` and ``assets/`` recursively, skipping dependency,
    VCS, and output directories, then appends known root files.
    """
    base = root or Path.cwd()
    files: list[str] = []
    for name in SOURCE_DIRS:
        source = base / name
        if not source.is_dir():
            continue
        for path in sorted(source.rglob("*")):
            rel = path.relative_to(base)
            if path.is_file() and not _excluded(rel):
                files.append(rel.as_posix())

    for name in ROOT_FILES:
        if (base / name).is_file():
            files.append(name)
    return files
