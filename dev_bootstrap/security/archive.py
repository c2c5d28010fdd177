"""Safe source-distribution extraction.

Guards against common archive attacks:
- Tar Slip (../ traversal)
- Absolute paths
- Symlinks, hard links and device nodes (skipped: an sdist never needs them)
- Oversized files (basic cap)
"""

from __future__ import annotations

import os
import stat
import tarfile
from pathlib import Path

from dev_bootstrap.errors import InstallFailure, UnsafeArchive

MAX_MEMBER_BYTES = 128 * 1024 * 1024  # 128 MiB per member


def _is_within(base: Path, target: Path) -> bool:
    try:
        target.relative_to(base)
        return True
    except ValueError:
        return False


def safe_extract_tar(archive: Path, dest: Path) -> list[Path]:
    """Extract the gzipped tarball *archive* into *dest*; return the files written.

    A corrupt or truncated archive, or a failed write, raises :class:`InstallFailure`.
    """
    try:
        return _extract(archive, dest)
    except (tarfile.TarError, EOFError, OSError) as exc:
        raise InstallFailure(f"Cannot extract {archive.name}: {exc}") from exc


def _extract(archive: Path, dest: Path) -> list[Path]:
    dest.mkdir(parents=True, exist_ok=True)
    base = dest.resolve()
    written: list[Path] = []
    with tarfile.open(archive, "r:gz") as tar:
        for m in tar.getmembers():
            fn = Path(m.name)
            if fn.is_absolute() or ".." in fn.parts:
                raise UnsafeArchive(f"Unsafe member path: {m.name}")
            target = (dest / fn).resolve()
            if not _is_within(base, target):
                raise UnsafeArchive(f"Member escapes destination: {m.name}")
            if m.isdir():
                target.mkdir(parents=True, exist_ok=True)
                continue
            if not m.isfile():
                continue
            if m.size > MAX_MEMBER_BYTES:
                raise UnsafeArchive(f"Member too large: {m.name} ({m.size} bytes)")
            target.parent.mkdir(parents=True, exist_ok=True)
            src = tar.extractfile(m)
            if src is None:
                continue
            with src, open(target, "wb") as out:
                out.write(src.read())
            # strip setuid/setgid
            os.chmod(target, stat.S_IMODE(m.mode) & ~stat.S_ISUID & ~stat.S_ISGID)
            written.append(target)
    return written
