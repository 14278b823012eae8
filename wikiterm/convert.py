"""Storage-format HTML <-> markdown conversion through pandoc."""

from __future__ import annotations

import logging
import shutil
import subprocess

from .errors import ConversionError

logger = logging.getLogger(__name__)

PANDOC = "pandoc"


def _run_pandoc(source: str, input_format: str, output_format: str) -> str:
    executable = shutil.which(PANDOC)
    if executable is None:
        raise ConversionError("pandoc is not installed or not on PATH")
    cmd = [executable, "--from", input_format, "--to", output_format, "--wrap=none"]
    try:
        completed = subprocess.run(
            cmd,
            input=source,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise ConversionError(f"Failed to run pandoc: {exc}") from exc
    if completed.returncode != 0:
        logger.warning("pandoc exited with %d: %s", completed.returncode, completed.stderr.strip())
        raise ConversionError(f"pandoc could not convert {input_format} to {output_format}: {completed.stderr.strip()}")
    return completed.stdout


def html_to_markdown(html: str) -> str:
    if not html.strip():
        return ""
    return _run_pandoc(html, "html", "markdown")


def markdown_to_html(markdown: str) -> str:
    if not markdown.strip():
        return ""
    return _run_pandoc(markdown, "markdown", "html")
