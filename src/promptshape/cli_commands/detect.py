"""``promptshape detect`` — show which format a model name maps to."""

from __future__ import annotations

import click

from promptshape.core.detector import detect_format_from_model


@click.command()
@click.argument("model")
def detect(model: str) -> None:
    """Print the request format (google, claude or openai) for MODEL."""
    click.echo(detect_format_from_model(model))
