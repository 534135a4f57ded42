from __future__ import annotations

import mimetypes
import os
import threading
import traceback
import tkinter as tk
from dataclasses import replace
from tkinter import filedialog, messagebox, ttk
from typing import List, Optional, Tuple

from PIL import Image, ImageOps

from photocheck.app.state import AppState
from photocheck.core.errors import DecodeError, PhotoValidationError
from photocheck.core.models import ValidationConfig
from photocheck.ui.image_canvas import PhotoCanvas
from photocheck.validation.report import ValidationResult
from photocheck.validation.validator import format_report_text, validate_passport_photo


def check_rows(result: ValidationResult) -> List[Tuple[str, str, str]]:
    """(check, status, note) rows for the results table."""
    d = result.details
    placeholder = "" if d.eye_detection_available else "Not checked yet (placeholder)"
    return [
        ("Face detected", "✅" if d.face_detected else "❌", "Skin-tone coverage proxy"),
        ("Eyes open", "✅" if d.eyes_open else "❌", placeholder),
        ("Proper lighting", "✅" if d.proper_lighting else "❌", "Average brightness"),
        ("White background", "✅" if d.white_background else "❌", "Share of near-white pixels"),
        ("Face position", d.face_position.value, placeholder),
    ]


def read_upload(path: str) -> Tuple[bytes, Image.Image]:
    """Raw bytes plus an RGB preview for `path`; unreadable files raise DecodeError."""
    try:
        with open(path, "rb") as fh:
            data = fh.read()
        with Image.open(path) as img:
            preview = ImageOps.exif_transpose(img).convert("RGB")
    except (OSError, Image.DecompressionBombError) as e:
        raise DecodeError(f"could not open {path}: {e}") from e
    return data, preview


def run_validation(
    data: bytes, mime: Optional[str], cfg: ValidationConfig
) -> Tuple[Optional[ValidationResult], Optional[str]]:
    """(result, None) on success, (None, error text for the dialog) on any failure."""
    try:
        return validate_passport_photo(data, mime, cfg), None
    except PhotoValidationError as e:
        return None, e.user_message
    except Exception as e:
        return None, f"{e}\n\n{traceback.format_exc()}".strip()


class PhotoCheckApp(ttk.Frame):
    """Upload a photo, validate it, inspect the individual checks."""

    def __init__(self, master: tk.Tk, state: AppState):
        super().__init__(master)
        self.master = master
        self.state = state

        self._build_style()
        self._build_layout()
        self._bind_shortcuts()

        self.set_status("Ready.")
        self._set_buttons_initial_state()

    # ---------- UI construction ----------

    def _build_style(self) -> None:
        style = ttk.Style(self.master)
        if "clam" in style.theme_names():
            style.theme_use("clam")

    def _build_layout(self) -> None:
        self.pack(fill="both", expand=True)

        toolbar = ttk.Frame(self, padding=(10, 8))
        toolbar.pack(side="top", fill="x")

        self.btn_upload = ttk.Button(toolbar, text="Upload", command=self.on_upload)
        self.btn_validate = ttk.Button(toolbar, text="Validate", command=self.on_validate)
        self.btn_copy_report = ttk.Button(toolbar, text="Copy report", command=self.on_copy_report)
        self.btn_reset = ttk.Button(toolbar, text="Reset", command=self.on_reset)

        self.btn_upload.pack(side="left")
        ttk.Separator(toolbar, orient="vertical").pack(side="left", fill="y", padx=8)
        self.btn_validate.pack(side="left")
        self.btn_copy_report.pack(side="left", padx=(6, 0))
        self.btn_reset.pack(side="left", padx=(12, 0))

        self.progress = ttk.Progressbar(toolbar, mode="indeterminate", length=120)
        self.progress.pack(side="right")

        main = ttk.PanedWindow(self, orient="horizontal")
        main.pack(side="top", fill="both", expand=True, padx=10, pady=(0, 10))

        # Left pane: photo
        left = ttk.LabelFrame(main, text="Photo", padding=8)
        main.add(left, weight=1)

        self.photo_canvas = PhotoCanvas(left)
        self.photo_canvas.pack(fill="both", expand=True)
        self.photo_meta = ttk.Label(left, text="No file loaded.")
        self.photo_meta.pack(side="bottom", anchor="w", pady=(6, 0))

        # Right pane: results + settings
        right = ttk.Frame(main)
        main.add(right, weight=1)

        results = ttk.LabelFrame(right, text="Analysis results", padding=8)
        results.pack(fill="both", expand=True)
        results.columnconfigure(0, weight=1)
        results.rowconfigure(1, weight=1)

        self.verdict_var = tk.StringVar(value="Not validated yet.")
        ttk.Label(results, textvariable=self.verdict_var, wraplength=420).grid(row=0, column=0, sticky="w", pady=(0, 6))

        columns = ("check", "status", "note")
        self.tree = ttk.Treeview(results, columns=columns, show="headings", height=6)
        self.tree.heading("check", text="Check")
        self.tree.heading("status", text="Status")
        self.tree.heading("note", text="Note")
        self.tree.column("check", width=150, stretch=False)
        self.tree.column("status", width=90, stretch=False)
        self.tree.column("note", width=260, stretch=True)
        self.tree.grid(row=1, column=0, sticky="nsew")

        self.confidence_var = tk.StringVar(value="")
        ttk.Label(results, textvariable=self.confidence_var).grid(row=2, column=0, sticky="w", pady=(6, 0))

        settings = ttk.LabelFrame(right, text="Settings", padding=8)
        settings.pack(fill="x", pady=(8, 0))

        ttk.Label(settings, text="Pass threshold:").grid(row=0, column=0, sticky="w", pady=3)
        self.var_threshold = tk.DoubleVar(value=self.state.config.pass_threshold)
        ttk.Spinbox(settings, from_=0.0, to=1.0, increment=0.05, textvariable=self.var_threshold, width=8).grid(
            row=0, column=1, sticky="w", pady=3
        )

        ttk.Label(settings, text="Sample stride:").grid(row=1, column=0, sticky="w", pady=3)
        self.var_stride = tk.IntVar(value=self.state.config.sample_stride)
        ttk.Spinbox(settings, from_=1, to=8, textvariable=self.var_stride, width=8).grid(
            row=1, column=1, sticky="w", pady=3
        )

        ttk.Button(settings, text="Restore defaults", command=self.on_restore_defaults).grid(
            row=2, column=0, sticky="w", pady=(8, 0)
        )

        status = ttk.Frame(self, padding=(10, 6))
        status.pack(side="bottom", fill="x")
        self.status_var = tk.StringVar(value="Ready.")
        ttk.Label(status, textvariable=self.status_var).pack(side="left")

    def _bind_shortcuts(self) -> None:
        for mod in ("Control", "Command"):
            self.master.bind_all(f"<{mod}-o>", lambda e: self.on_upload())
            self.master.bind_all(f"<{mod}-r>", lambda e: self.on_validate())

    # ---------- Utilities ----------

    def set_status(self, text: str) -> None:
        self.status_var.set(text)

    def _set_buttons_initial_state(self) -> None:
        self.btn_validate.state(["disabled"])
        self.btn_copy_report.state(["disabled"])

    def _set_busy(self, busy: bool, message: str = "Working…") -> None:
        if busy:
            for btn in (self.btn_upload, self.btn_validate, self.btn_copy_report, self.btn_reset):
                btn.state(["disabled"])
            self.set_status(message)
            self.progress.start(12)
            return

        self.progress.stop()
        self.btn_upload.state(["!disabled"])
        self.btn_reset.state(["!disabled"])
        self.btn_validate.state(["!disabled"] if self.state.image_bytes is not None else ["disabled"])
        self.btn_copy_report.state(["!disabled"] if self.state.result is not None else ["disabled"])

    def _clear_results(self) -> None:
        for iid in self.tree.get_children():
            self.tree.delete(iid)
        self.verdict_var.set("Not validated yet.")
        self.confidence_var.set("")
        self.photo_canvas.set_verdict(None)
        self.btn_copy_report.state(["disabled"])

    def _render_result(self) -> None:
        self._clear_results()
        result = self.state.result
        if result is None:
            return

        for row in check_rows(result):
            self.tree.insert("", "end", values=row)

        title = "Photo Validated Successfully" if result.passed else "Photo Validation Failed"
        self.verdict_var.set(f"{title}: {result.message}")
        self.confidence_var.set(f"Confidence Score: {result.confidence * 100:.1f}%")
        self.photo_canvas.set_verdict(result.passed)
        self.btn_copy_report.state(["!disabled"])

    def _sync_config_from_ui(self) -> None:
        # ValidationConfig is frozen and validates itself -> replace() and keep the old value on error
        cfg = self.state.config
        try:
            cfg = replace(cfg, pass_threshold=float(self.var_threshold.get()))
        except (tk.TclError, ValueError):
            self.var_threshold.set(cfg.pass_threshold)
        try:
            cfg = replace(cfg, sample_stride=int(self.var_stride.get()))
        except (tk.TclError, ValueError):
            self.var_stride.set(cfg.sample_stride)
        self.state.config = cfg

    # ---------- Upload ----------

    def on_upload(self) -> None:
        path = filedialog.askopenfilename(
            title="Select a passport photo",
            filetypes=[
                ("Image files", "*.jpg *.jpeg *.png *.webp"),
                ("All files", "*.*"),
            ],
        )
        if not path:
            return

        try:
            data, preview = read_upload(path)
        except DecodeError as e:
            messagebox.showerror("Upload failed", f"Could not open image.\n\n{e.detail}")
            self.set_status("Upload failed.")
            return

        self.state.load_upload(path, data, mimetypes.guess_type(path)[0], preview)

        self.photo_canvas.set_image(preview)
        self.photo_meta.configure(
            text=f"File: {os.path.basename(path)}   Size: {preview.width}x{preview.height}   {len(data) // 1024} KB"
        )
        self._clear_results()
        self.btn_validate.state(["!disabled"])
        self.set_status("Loaded photo. Ready to validate.")

    # ---------- Validate ----------

    def on_validate(self) -> None:
        if self.state.image_bytes is None:
            messagebox.showwarning("No input", "Upload a photo first.")
            return

        self._sync_config_from_ui()
        data = self.state.image_bytes
        mime = self.state.mime_type
        cfg = self.state.config

        self._set_busy(True, "Analyzing photo…")

        def worker() -> None:
            result, err = run_validation(data, mime, cfg)

            def finish_on_ui_thread() -> None:
                if err is not None:
                    self.state.result = None
                    self._set_busy(False)
                    self._clear_results()
                    messagebox.showerror("Validation failed", err)
                    self.set_status("Validation failed.")
                    return

                self.state.result = result
                self._set_busy(False)
                self._render_result()
                if result.passed:
                    self.set_status("Validation complete. Photo meets the checks.")
                else:
                    self.set_status("Validation complete (some checks failed).")

            self.master.after(0, finish_on_ui_thread)

        threading.Thread(target=worker, daemon=True).start()

    def on_copy_report(self) -> None:
        result = self.state.result
        if result is None:
            messagebox.showinfo("No report", "Run Validate first.")
            return

        self.master.clipboard_clear()
        self.master.clipboard_append(format_report_text(result))
        self.set_status("Copied validation report.")

    def on_reset(self) -> None:
        self.state.reset()
        self.photo_canvas.clear()
        self.photo_meta.configure(text="No file loaded.")
        self._clear_results()
        self._sync_vars_from_config()
        self._set_buttons_initial_state()
        self.set_status("Reset complete.")

    def on_restore_defaults(self) -> None:
        self.state.config = ValidationConfig()
        self._sync_vars_from_config()
        self.set_status("Defaults restored.")

    def _sync_vars_from_config(self) -> None:
        self.var_threshold.set(self.state.config.pass_threshold)
        self.var_stride.set(self.state.config.sample_stride)


def run() -> None:
    root = tk.Tk()
    root.title("Passport Photo Check")
    root.geometry("1000x640")
    root.minsize(820, 560)

    state = AppState()
    PhotoCheckApp(root, state)

    root.mainloop()
