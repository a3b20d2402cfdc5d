"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
RENDERING_PANEL = "Rendering"
OUTPUT_PANEL = "Output"

InputPathArgument = Annotated[
    Path,
    typer.Argument(
        metavar="INPUT",
        help="HTML fragment or Markdown (.md) document to filter.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

RegistryOption = Annotated[
    Path,
    typer.Option(
        "--registry",
        "-r",
        help="JSON or YAML file mapping emoji tokens (':+1:') to image paths.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

MarkdownOption = Annotated[
    bool | None,
    typer.Option(
        "--markdown/--html",
        help="Treat INPUT as Markdown or HTML. Defaults to the file suffix.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

CssClassOption = Annotated[
    str,
    typer.Option(
        "--css-class",
        help="Class attached to generated <img> elements.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

MimeTypeOption = Annotated[
    str,
    typer.Option(
        "--mime-type",
        help="MIME type announced in generated data URIs.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

TimeoutOption = Annotated[
    float | None,
    typer.Option(
        "--timeout",
        help="Seconds allowed for reading one emoji image.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

OutputOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Write the filtered HTML to this file instead of stdout.",
        dir_okay=False,
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]
