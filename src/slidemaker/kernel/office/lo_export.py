from __future__ import annotations
import os, shutil, subprocess, signal, tempfile
from pathlib import Path
from typing import Optional

from slidemaker.core.logging import get_logger

log = get_logger(__name__)

MACOS_SOFFICE = "/Applications/LibreOffice.app/Contents/MacOS/soffice"


class LOExportError(RuntimeError):
    pass


def find_soffice(configured: Optional[str] = None) -> str:
    """Configured path, then $SOFFICE_BIN, then PATH, then the macOS bundle."""
    for candidate in (configured, os.environ.get("SOFFICE_BIN")):
        if candidate and Path(candidate).exists():
            return candidate
    found = shutil.which("soffice") or (MACOS_SOFFICE if Path(MACOS_SOFFICE).exists() else None)
    if not found:
        raise LOExportError("LibreOffice 'soffice' not found. Set SOFFICE_BIN in .env")
    return found


def _run(cmd, timeout_s: int) -> bytes:
    """Run soffice in its own process group; returns stderr. Kills and reaps the group on timeout."""
    try:
        proc = subprocess.Popen(
            cmd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as e:
        raise LOExportError(f"LibreOffice failed to start: {e}") from e

    try:
        _, stderr = proc.communicate(timeout=timeout_s)
    except subprocess.TimeoutExpired:
        os.killpg(proc.pid, signal.SIGKILL)
        proc.communicate()
        log.warning("soffice killed after %ss", timeout_s)
        raise LOExportError(f"LibreOffice timed out after {timeout_s}s")

    if proc.returncode != 0:
        raise LOExportError(
            f"LibreOffice returned {proc.returncode}: "
            f"{(stderr or b'').decode(errors='ignore')[:500]}"
        )
    return stderr or b""


def convert_bytes(data: bytes, suffix: str, target: str = "pptx",
                  soffice_bin: Optional[str] = None, timeout_s: int = 90) -> bytes:
    """
    Round-trip `data` through headless LibreOffice and return the converted bytes.
    Used for legacy .ppt and .odp decks, which python-pptx cannot open.
    """
    soffice = find_soffice(soffice_bin)

    with tempfile.TemporaryDirectory(prefix="slidemaker-lo-") as tmp:
        src = Path(tmp) / f"input{suffix}"
        src.write_bytes(data)
        outdir = Path(tmp) / "out"
        outdir.mkdir()

        _run([
            soffice,
            "--headless", "--invisible",
            "--nologo", "--nolockcheck",
            "--nodefault", "--norestore",
            "--convert-to", target,
            "--outdir", str(outdir),
            str(src),
        ], timeout_s)

        out = outdir / f"{src.stem}.{target}"
        if not out.exists():
            raise LOExportError(f"LibreOffice reported success but {out.name} not found")
        return out.read_bytes()
