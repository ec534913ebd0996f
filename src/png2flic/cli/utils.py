"""Shared utilities for CLI commands."""

import sys
from pathlib import Path

import click

from ..error_handling import Png2FlicError, describe_error
from ..meta import FlicMetadata
from ..pipeline import EncodeResult


def handle_generic_error(command_name: str, error: Exception) -> None:
    """Handle generic command errors with consistent formatting."""
    if isinstance(error, Png2FlicError):
        message = describe_error(error)
    else:
        message = str(error)
    click.echo(f"❌ {command_name} failed: {message}", err=True)
    sys.exit(1)


def handle_keyboard_interrupt(command_name: str) -> None:
    """Handle keyboard interrupt with consistent formatting."""
    click.echo(f"\n⏹️  {command_name} interrupted by user", err=True)
    sys.exit(1)


def display_path_info(label: str, path: Path, emoji: str = "📁") -> None:
    """Display path information with consistent formatting."""
    click.echo(f"{emoji} {label}: {path}")


def display_results_summary(result: EncodeResult, metadata: FlicMetadata | None = None) -> None:
    """Display the results of an encoding run."""
    status = "success" if result.succeeded else "failed"

    click.echo("\n📊 Results:")
    click.echo(f"   • Status: {status}")
    click.echo(f"   • Processed: {result.processed} of {result.total}")
    click.echo(f"   • Frames: {result.frames}")

    if metadata is not None:
        click.echo(f"   • Size: {metadata.kilobytes:.1f} KB")
        click.echo(f"   • SHA256: {metadata.flic_sha}")

    click.echo(f"   • Results saved to: {result.output}")
