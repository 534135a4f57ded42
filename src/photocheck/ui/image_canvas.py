from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Optional, Tuple

from PIL import Image, ImageTk


def fit_size(img_w: int, img_h: int, box_w: int, box_h: int) -> Tuple[int, int]:
    """Largest (w, h) with the image's aspect ratio that fits inside the box."""
    if img_w <= 0 or img_h <= 0 or box_w <= 2 or box_h <= 2:
        return (1, 1)
    scale = min(box_w / img_w, box_h / img_h)
    return max(1, int(img_w * scale)), max(1, int(img_h * scale))


class PhotoCanvas(ttk.Frame):
    """Resizable photo preview with an optional PASS/FAIL badge in the corner."""

    BADGE_COLORS = {True: "#2e7d32", False: "#c62828"}

    def __init__(self, master, *, bg: str = "#f3f3f3"):
        super().__init__(master)
        self._canvas = tk.Canvas(self, highlightthickness=0, bg=bg)
        self._canvas.pack(fill="both", expand=True)

        self._photo: Optional[ImageTk.PhotoImage] = None
        self._pil: Optional[Image.Image] = None
        self._verdict: Optional[bool] = None

        self._canvas.bind("<Configure>", lambda _evt: self._redraw())

        self._placeholder_id = self._canvas.create_text(
            10, 10, anchor="nw",
            text="Upload a passport photo to check it",
            fill="#555",
            font=("TkDefaultFont", 11),
        )

    def set_image(self, pil: Optional[Image.Image]) -> None:
        self._pil = pil
        self._verdict = None
        self._redraw()

    def set_verdict(self, passed: Optional[bool]) -> None:
        self._verdict = passed
        self._redraw()

    def clear(self) -> None:
        self.set_image(None)

    def _redraw(self) -> None:
        self._canvas.delete("img", "badge")
        if self._pil is None:
            self._canvas.itemconfigure(self._placeholder_id, state="normal")
            return

        self._canvas.itemconfigure(self._placeholder_id, state="hidden")

        w = max(1, self._canvas.winfo_width())
        h = max(1, self._canvas.winfo_height())
        new_w, new_h = fit_size(self._pil.width, self._pil.height, w, h)
        self._photo = ImageTk.PhotoImage(self._pil.resize((new_w, new_h), Image.LANCZOS))
        x = (w - new_w) // 2
        y = (h - new_h) // 2
        self._canvas.create_image(x, y, anchor="nw", image=self._photo, tags=("img",))

        if self._verdict is not None:
            color = self.BADGE_COLORS[self._verdict]
            self._canvas.create_rectangle(x + 8, y + 8, x + 78, y + 34, fill=color, outline="", tags=("badge",))
            self._canvas.create_text(
                x + 43, y + 21, text="PASS" if self._verdict else "FAIL",
                fill="white", font=("TkDefaultFont", 11, "bold"), tags=("badge",),
            )
