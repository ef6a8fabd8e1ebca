import hashlib, mimetypes, shutil, uuid
from pathlib import Path
from datetime import datetime

from intake_core.models import PreviewHandle, SampleInfo

ACCEPTED_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".tif", ".tiff", ".webp", ".dcm")


class StagingError(Exception):
    """Raised when a preview copy cannot be created."""


def is_accepted(path: str | Path) -> bool:
    p = Path(path)
    return p.is_file() and p.suffix.lower() in ACCEPTED_SUFFIXES

def _hash_file(path: Path, algo="sha256", block_size=1024*1024):
    h = hashlib.new(algo)
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(block_size), b""):
            h.update(chunk)
    return h.hexdigest()

def stage_file(src: str | Path, dest_root: str | Path) -> Path:
    src = Path(src)
    dest_root = Path(dest_root)
    date = datetime.now().strftime("%Y%m%d")
    dest_dir = dest_root / date
    dest_dir.mkdir(parents=True, exist_ok=True)
    sha256 = _hash_file(src, "sha256")
    # unique per call: re-staging the same file must not reuse a live preview path
    staged = dest_dir / f"{sha256[:8]}_{uuid.uuid4().hex[:8]}_{src.name}"
    shutil.copy2(src, staged)
    return staged

def compute_metadata(path: str | Path) -> SampleInfo:
    path = Path(path)
    mime, _ = mimetypes.guess_type(path.name)
    return SampleInfo(
        path=path,
        size=path.stat().st_size,
        sha256=_hash_file(path, "sha256"),
        mime=mime or "application/octet-stream",
    )


class PreviewProvider:
    """Stages uploaded files under <root>/<date>/ and hands out file:// handles."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def acquire(self, src: str | Path) -> PreviewHandle:
        try:
            staged = stage_file(src, self.root).resolve()
        except OSError as e:
            raise StagingError(f"cannot stage {src}: {e}") from e
        return PreviewHandle(uri=staged.as_uri(), path=staged)

    def release(self, handle: PreviewHandle) -> None:
        # a second release finds nothing to delete
        handle.path.unlink(missing_ok=True)
        try:
            handle.path.parent.rmdir()
        except OSError:
            pass
