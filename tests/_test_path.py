"""Test helpers.

These tests assume your repo layout is:
  project_root/
    src/
      photocheck/
    tests/

Also holds small in-memory image builders shared by the test modules.
"""

import io
import sys
from pathlib import Path

import numpy as np
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def encode(arr: np.ndarray, fmt: str = "PNG", **save_kwargs) -> bytes:
    """Encode an (h, w, 3|4) uint8 array to image bytes."""
    buf = io.BytesIO()
    Image.fromarray(arr.astype(np.uint8)).save(buf, format=fmt, **save_kwargs)
    return buf.getvalue()


def solid(color, size=(20, 20)) -> np.ndarray:
    h, w = size
    return np.tile(np.array(color, dtype=np.uint8), (h, w, 1))


def passport_like() -> np.ndarray:
    """
    20x20 RGB image: 50% white (201), 15% skin (120, 60, 30), 35% dark (26).
    Mean brightness is ~120.1.
    """
    flat = np.zeros((400, 3), dtype=np.uint8)
    flat[:200] = (201, 201, 201)
    flat[200:260] = (120, 60, 30)
    flat[260:] = (26, 26, 26)
    return flat.reshape(20, 20, 3)
