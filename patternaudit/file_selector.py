"""Candidate file selection for a scan target."""

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from patternaudit.models import ScanError, ScanErrorKind
from patternaudit.utils.constants import SCANNED_EXTENSIONS
from patternaudit.utils.helpers import resolve_within
from patternaudit.utils.logging import logger


@dataclass(frozen=True)
class Selection:
    """Ordered candidate files, or the error that prevented selection."""

    files: tuple[Path, ...] = ()
    error: ScanError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _is_hidden(path: Path, base: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(base).parts)


def select_files(
    project_root: Path | str,
    target: str,
    extensions: Iterable[str] = SCANNED_EXTENSIONS,
    include_hidden: bool = False,
) -> Selection:
    """Resolve ``target`` against ``project_root`` and list the files to scan.

    A directory yields every file below it whose suffix is in ``extensions``,
    sorted by POSIX path so the order is stable across platforms and runs.
    A file yields itself regardless of its extension. Anything else is a
    TargetNotFound error and no file is read; so is a target that resolves
    outside the project root. A leading separator is read as root-relative.
    """
    target_path = resolve_within(project_root, target)

    if target_path is None:
        logger.warning(f"Target {target} resolves outside {project_root}")
    elif target_path.is_dir():
        suffixes = set(extensions)
        files = [
            p
            for p in target_path.rglob("*")
            if p.suffix in suffixes
            and p.is_file()
            and (include_hidden or not _is_hidden(p, target_path))
        ]
        files.sort(key=lambda p: p.as_posix())
        logger.debug(f"Selected {len(files)} files under {target_path}")
        return Selection(files=tuple(files))
    elif target_path.is_file():
        return Selection(files=(target_path,))

    return Selection(
        error=ScanError(
            kind=ScanErrorKind.TARGET_NOT_FOUND,
            message=f"Target not found: {target}",
            path=target,
        )
    )
