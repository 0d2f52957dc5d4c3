"""Bundled query and profile resources, readable from a directory or an archive.

The package ships its default rule queries under ``resources/queries/`` and
the default profile under ``resources/profiles/``.  Depending on how the
package is deployed those files live either in a plain directory
(source checkout, regular install) or inside a zip archive (zipapp,
zipimport).  Callers only see the :class:`ResourceLister` protocol.
"""

from __future__ import annotations

import importlib.resources
import io
import zipfile
from pathlib import Path
from typing import Protocol

from ontolint.errors import ResourceAccessError

# ---------------------------------------------------------------------------
# Capability
# ---------------------------------------------------------------------------


class ResourceLister(Protocol):
    """List and read bundled resource entries by name."""

    def list_entries(self, prefix: str) -> list[str]:
        """Return sorted names of the files directly under *prefix*."""
        ...

    def read_text(self, name: str) -> str:
        """Return the full text of entry *name*, line endings normalized to ``\\n``."""
        ...


# ---------------------------------------------------------------------------
# Implementations
# ---------------------------------------------------------------------------


class DirectoryResourceLister:
    """Resources stored as a loose file tree rooted at *root*."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def list_entries(self, prefix: str) -> list[str]:
        base = self.root / prefix
        if not base.is_dir():
            msg = f"Cannot access resource directory: {base}"
            raise ResourceAccessError(msg)
        try:
            return sorted(
                path.relative_to(self.root).as_posix()
                for path in base.iterdir()
                if path.is_file()
            )
        except OSError as exc:
            msg = f"Cannot list resources in {base}: {exc}"
            raise ResourceAccessError(msg) from exc

    def read_text(self, name: str) -> str:
        path = self.root / name
        try:
            # Universal newlines: \r\n and \r become \n.
            with path.open("r", encoding="utf-8") as fh:
                return fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Cannot read resource {name}: {exc}"
            raise ResourceAccessError(msg) from exc


class ArchiveResourceLister:
    """Resources stored inside a zip archive, under the member prefix *root*."""

    def __init__(self, archive: Path, root: str = "") -> None:
        self.archive = archive
        self.root = root.strip("/")

    def _member(self, name: str) -> str:
        name = name.strip("/")
        return f"{self.root}/{name}" if self.root else name

    def list_entries(self, prefix: str) -> list[str]:
        member_prefix = self._member(prefix) + "/"
        strip = len(self.root) + 1 if self.root else 0
        try:
            with zipfile.ZipFile(self.archive) as zf:
                names = zf.namelist()
        except (OSError, zipfile.BadZipFile) as exc:
            msg = f"Cannot access entries in archive {self.archive}: {exc}"
            raise ResourceAccessError(msg) from exc
        entries: list[str] = []
        for name in names:
            if not name.startswith(member_prefix):
                continue
            rest = name[len(member_prefix) :]
            # Skip directory members and anything nested deeper.
            if rest and "/" not in rest:
                entries.append(name[strip:])
        return sorted(entries)

    def read_text(self, name: str) -> str:
        member = self._member(name)
        try:
            with zipfile.ZipFile(self.archive) as zf, zf.open(member) as raw:
                return io.TextIOWrapper(raw, encoding="utf-8").read()
        except (OSError, KeyError, UnicodeDecodeError, zipfile.BadZipFile) as exc:
            msg = f"Cannot read resource {name} from {self.archive}: {exc}"
            raise ResourceAccessError(msg) from exc


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


def default_lister() -> ResourceLister:
    """Return the lister matching how this package's resources are deployed."""
    base = importlib.resources.files(__name__)
    if isinstance(base, Path):
        return DirectoryResourceLister(base)
    if isinstance(base, zipfile.Path):
        archive = base.root.filename
        if archive is None:
            msg = "Cannot locate the archive holding bundled resources"
            raise ResourceAccessError(msg)
        return ArchiveResourceLister(Path(archive), base.at)
    msg = f"Unsupported resource location: {base!r}"
    raise ResourceAccessError(msg)
