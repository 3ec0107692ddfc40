"""CLI entry point for the splatasset transcoder.

Usage:
    splatasset transcode scan.ply --preset Medium -o out/   # Transcode one file
    splatasset inspect scan.ply                             # Show PLY header
    splatasset serve --port 8080                            # Loopback trigger listener
    splatasset info                                         # Show pipeline info
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from splatasset.core.logging import setup_logging

app = typer.Typer(name="splatasset", help="Gaussian splat PLY to GPU asset transcoder")
console = Console()


def _pipeline_config(config: Optional[Path]):
    from splatasset.core.pipeline_runner import default_pipeline_config, load_pipeline_config

    if config is None:
        return default_pipeline_config()
    return load_pipeline_config(config)


def _formats(preset: Optional[str]):
    from splatasset.core.contracts import EncodingFormats

    if preset is None:
        return None
    try:
        return EncodingFormats.from_preset(preset)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


@app.command()
def transcode(
    source: Path = typer.Argument(..., help="3DGS PLY file"),
    preset: Optional[str] = typer.Option(None, help="Quality preset: VeryLow|Low|Medium|High|VeryHigh"),
    config: Optional[Path] = typer.Option(None, help="Pipeline config path (default: built-in pipeline)"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Write .bytes files and descriptor here"),
    log_level: str = typer.Option("INFO", help="Logging level"),
) -> None:
    """Transcode one PLY file into GPU-ready buffers."""
    setup_logging(log_level)
    from splatasset.core.errors import TranscodeError
    from splatasset.core.pipeline_runner import transcode as run_transcode
    from splatasset.utils.io import write_asset

    formats = _formats(preset)
    try:
        asset = run_transcode(source.absolute(), formats=formats, pipeline_cfg=_pipeline_config(config))
    except TranscodeError as e:
        console.print(f"[red]{type(e).__name__}: {e}[/red]")
        raise typer.Exit(1)

    if asset is None:
        console.print(f"[yellow]{source} contains no splats, nothing written[/yellow]")
        return

    table = Table(title=f"Asset: {source.name}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Splats", str(asset.splat_count))
    table.add_row("Bounds", f"{asset.bounds.min} .. {asset.bounds.max}")
    table.add_row(
        "Formats",
        f"pos={asset.formats.pos.name} scale={asset.formats.scale.name} "
        f"color={asset.formats.color.name} sh={asset.formats.sh.name}",
    )
    table.add_row("Color texture", f"{asset.texture_width} x {asset.texture_height}")
    for label, data in (("Positions", asset.positions), ("Other", asset.other),
                        ("Color", asset.color), ("SH", asset.sh)):
        table.add_row(label, f"{len(data):,} bytes")
    table.add_row("Cameras", str(len(asset.cameras)) if asset.cameras else "-")
    table.add_row("Hash", asset.content_hash)
    console.print(table)

    if output_dir is not None:
        paths = write_asset(asset, output_dir, source.stem)
        console.print(f"[green]Wrote {len(paths)} files to {output_dir}[/green]")


@app.command()
def inspect(source: Path = typer.Argument(..., help="PLY file")) -> None:
    """Show the PLY header without decoding records."""
    from splatasset.core.errors import TranscodeError
    from splatasset.utils.io import RECORD_SIZE, read_ply_file

    try:
        header, body = read_ply_file(source)
    except TranscodeError as e:
        console.print(f"[red]{type(e).__name__}: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"PLY: {source.name}")
    table.add_column("#", style="dim")
    table.add_column("Property", style="cyan")
    for i, name in enumerate(header.attribute_names):
        table.add_row(str(i), name)
    console.print(table)

    stride_style = "green" if header.vertex_stride == RECORD_SIZE else "red"
    console.print(f"Vertices: {header.vertex_count}")
    console.print(f"Stride: [{stride_style}]{header.vertex_stride}[/{stride_style}] (expected {RECORD_SIZE})")
    console.print(f"Header: {header.header_size} bytes, body: {len(body):,} bytes")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8080, help="Bind port"),
    preset: Optional[str] = typer.Option(None, help="Quality preset for every request"),
    config: Optional[Path] = typer.Option(None, help="Pipeline config path (default: built-in pipeline)"),
    log_level: str = typer.Option("INFO", help="Logging level"),
) -> None:
    """Listen for POSTed PLY paths and transcode each one."""
    setup_logging(log_level)
    from splatasset.server import serve as run_server

    run_server(host, port, formats=_formats(preset), pipeline_cfg=_pipeline_config(config))


@app.command()
def info(config: Optional[Path] = typer.Option(None, help="Pipeline config path (default: built-in pipeline)")) -> None:
    """Show pipeline steps and their status."""
    pipeline_cfg = _pipeline_config(config)
    table = Table(title=f"Pipeline: {pipeline_cfg.project_name}")
    table.add_column("#", style="dim")
    table.add_column("Step", style="cyan")
    table.add_column("Module", style="green")
    table.add_column("Enabled", style="yellow")
    table.add_column("Depends On", style="dim")

    for i, step in enumerate(pipeline_cfg.steps, 1):
        table.add_row(
            str(i),
            step.name,
            step.module,
            "Y" if step.enabled else "N",
            ", ".join(step.depends_on) if step.depends_on else "-",
        )
    console.print(table)


if __name__ == "__main__":
    app()
