from __future__ import annotations
import os
import sys
import uvicorn

# --- Make sure ./src is on sys.path so `slidemaker.*` is importable ---
BASE_DIR = os.path.dirname(__file__)        # points to "<repo>/src"
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from slidemaker.core.config import settings  # noqa: E402

if __name__ == "__main__":
    uvicorn.run("slidemaker.main:app", host="0.0.0.0", port=settings.PORT, reload=False)
