"""Change-aware, atomic writer for generated declaration files."""
import os
import stat
import tempfile
from pathlib import Path

from querytypes.core.errors import SourceFileError


def _target_mode(path: Path) -> int:
    """Mode the written file should end up with: the existing one, else 0666 minus umask."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_if_changed(path: Path, content: str) -> bool:
    """
    Write content to path unless the file already holds exactly that content.

    The file is replaced atomically so readers never see partial output.
    Permissions match a plain write: an existing file keeps its mode, a new
    one gets the default mode under the current umask.
    Returns True when the file was written.
    """
    try:
        if path.is_file() and path.read_text(encoding="utf-8") == content:
            return False
        path.parent.mkdir(parents=True, exist_ok=True)
        mode = _target_mode(path)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            # mkstemp creates 0600
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise SourceFileError(path, e) from e
    return True
