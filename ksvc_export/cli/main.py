"""Main CLI interface using Typer."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..core import ServiceExporter
from ..k8s import FileSource, K8sClient, ServiceFetcher
from ..model.export import ExportFormat, ExportMode, ExportOptions
from ..model.rules import NormalizationRules
from ..utils.logger import get_logger, set_verbosity

# Create CLI app
app = typer.Typer(
    name="ksvc-export",
    help="Export Knative services as portable, re-appliable manifests",
    add_completion=True,
)

# Manifests go to stdout, everything else to stderr
console = Console(stderr=True)
logger = get_logger(__name__)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Export Knative services as portable, re-appliable manifests."""
    set_verbosity(verbose)


@app.command()
def export(
    name: str = typer.Argument(..., help="Name of the service to export"),
    with_revisions: bool = typer.Option(
        False, "--with-revisions", help="Also export the revisions the service produced"
    ),
    mode: ExportMode = typer.Option(
        ExportMode.RESOURCES,
        "--mode",
        help="Shape of a --with-revisions export: a replayable service list (kubernetes) "
        "or the service plus a revision list (resources)",
    ),
    output: ExportFormat = typer.Option(
        ExportFormat.YAML, "--output", "-o", help="Output format of the manifest"
    ),
    namespace: Optional[str] = typer.Option(
        None, "--namespace", "-n", help="Namespace of the service"
    ),
    context: Optional[str] = typer.Option(
        None, "--context", "-c", help="Kubernetes context to use"
    ),
    from_file: Optional[Path] = typer.Option(
        None,
        "--from-file",
        "-f",
        help="Read the service and its revisions from a saved YAML/JSON file instead of the cluster",
    ),
    output_file: Optional[Path] = typer.Option(
        None, "--output-file", help="Write the manifest to this file instead of stdout"
    ),
    rules: Optional[Path] = typer.Option(
        None, "--rules", help="Path to a normalization rules file (YAML or JSON)"
    ),
):
    """Export a service, optionally with its revision history."""
    try:
        options = ExportOptions(with_revisions=with_revisions, mode=mode, output_format=output)
        # Fail on unusable flag combinations before touching the cluster
        options.check_combination()

        exporter = ServiceExporter(NormalizationRules.from_file(rules))

        if from_file:
            source = FileSource(from_file)
        else:
            source = ServiceFetcher(K8sClient(context=context, namespace=namespace))
        service, revisions = source.fetch(name)

        manifest = exporter.export(service, revisions, options)
        renderer = exporter.get_exporter(output)

        if output_file:
            renderer.export(manifest, output_file)
            console.print(f"[green]✓[/green] Manifest saved to: [cyan]{output_file}[/cyan]")
        else:
            typer.echo(renderer.render(manifest), nl=False)

    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
