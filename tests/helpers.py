"""Tree-building helpers shared by the test modules."""

from pathlib import Path

from sync_agents import frontmatter
from sync_agents.file_handler import LocalFileSystem


def write(path: Path, content: str | bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


def add_skill(
    skills_dir: Path,
    name: str,
    description: str = "A skill",
    body: str = "Skill body.\n",
    files: dict[str, str | bytes] | None = None,
    **metadata,
) -> Path:
    """Create ``<skills_dir>/<name>/SKILL.md`` plus any extra files."""
    skill_dir = skills_dir / name
    write(
        skill_dir / "SKILL.md",
        frontmatter.serialize(
            {"name": name, "description": description, **metadata}, body
        ),
    )
    for relative_path, content in (files or {}).items():
        write(skill_dir / relative_path, content)
    return skill_dir


def add_agent(
    agents_dir: Path,
    name: str,
    description: str = "An agent",
    body: str = "Agent body.\n",
    **metadata,
) -> Path:
    return write(
        agents_dir / f"{name}.md",
        frontmatter.serialize(
            {"name": name, "description": description, **metadata}, body
        ),
    )


def read_doc(path: Path) -> tuple[dict, str]:
    return frontmatter.parse(path.read_text(encoding="utf-8"))


def snapshot(root: Path) -> dict[str, bytes]:
    """Every file under *root* keyed by relative path."""
    if not root.exists():
        return {}
    return {
        str(path.relative_to(root)): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }


class FailingFileSystem(LocalFileSystem):
    """``LocalFileSystem`` that raises ``PermissionError`` for chosen paths.

    A path fails when it equals, or lies under, one of the given paths.
    """

    def __init__(self, reads=(), writes=(), removes=()):
        self.reads = [Path(p) for p in reads]
        self.writes = [Path(p) for p in writes]
        self.removes = [Path(p) for p in removes]

    @staticmethod
    def _hit(path: Path, targets: list[Path]) -> bool:
        return any(path == t or t in path.parents for t in targets)

    def read_file(self, path: Path) -> bytes:
        if self._hit(path, self.reads):
            raise PermissionError(f"read denied: {path}")
        return super().read_file(path)

    def write_file(self, path: Path, data: bytes) -> None:
        if self._hit(path, self.writes):
            raise PermissionError(f"write denied: {path}")
        super().write_file(path, data)

    def remove_tree(self, path: Path) -> None:
        if self._hit(path, self.removes):
            raise PermissionError(f"remove denied: {path}")
        super().remove_tree(path)

    def copy_file(self, src: Path, dst: Path) -> None:
        if self._hit(src, self.reads):
            raise PermissionError(f"read denied: {src}")
        if self._hit(dst, self.writes):
            raise PermissionError(f"write denied: {dst}")
        super().copy_file(src, dst)
