"""Implementation of the ``emojify`` command."""

from __future__ import annotations

import asyncio

import typer

from mdfilters.core.config import build_config, load_registry
from mdfilters.core.exceptions import ConfigurationError
from mdfilters.core.pipeline import filter_html, render_markdown_html
from mdfilters.filters.emoji import EmojiFilter

from .._options import (
    CssClassOption,
    InputPathArgument,
    MarkdownOption,
    MimeTypeOption,
    OutputOption,
    RegistryOption,
    TimeoutOption,
)
from ..diagnostics import CliEmitter
from ..state import emit_error, emit_info


_MARKDOWN_SUFFIXES = {".md", ".markdown"}


def emojify(
    input_path: InputPathArgument,
    registry: RegistryOption,
    markdown_input: MarkdownOption = None,
    css_class: CssClassOption = "emoji",
    mime_type: MimeTypeOption = "image/png",
    timeout: TimeoutOption = None,
    output: OutputOption = None,
) -> None:
    """Replace :emoji: tokens with embedded images."""
    try:
        config = build_config(
            load_registry(registry),
            css_class=css_class,
            mime_type=mime_type,
            read_timeout=timeout,
        )
    except ConfigurationError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    source = input_path.read_text(encoding="utf-8")
    if markdown_input is None:
        markdown_input = input_path.suffix.lower() in _MARKDOWN_SUFFIXES
    html = render_markdown_html(source) if markdown_input else source

    emitter = CliEmitter()
    emoji_filter = EmojiFilter.from_config(config)
    emit_info(f"Loaded {len(config.registry)} emoji definition(s) from {registry}")
    result = asyncio.run(filter_html(html, [emoji_filter], emitter=emitter))

    if output is None:
        typer.echo(result, nl=not result.endswith("\n"))
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result, encoding="utf-8")
    emit_info(f"Wrote {output}")
