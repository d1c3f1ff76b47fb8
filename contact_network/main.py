"""
Contact Network Analysis CLI

Command-line interface for analysing contact relationship snapshots.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

# Initialize console for rich output
console = Console()


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure logging with rich handler."""
    handlers = [RichHandler(console=console, show_path=False)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
        handlers=handlers,
    )


def _load_analyzer(ctx: click.Context, input_path: str, infer: bool = False):
    """Load a snapshot and build an analyzer, exiting on load errors."""
    from contact_network.models.analyzer import NetworkAnalyzer
    from contact_network.models.strength import RelationshipStrengthEstimator
    from contact_network.pipeline.ingest import load_network_snapshot

    config = ctx.obj["config"]

    try:
        snapshot = load_network_snapshot(input_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading snapshot: {e}[/red]")
        sys.exit(1)

    relationships = snapshot.relationships
    if infer and not relationships:
        estimator = RelationshipStrengthEstimator(
            weights=config.strength.weights,
            caps=config.strength.caps,
            min_inferred_strength=config.strength.min_inferred_strength,
        )
        relationships = estimator.infer_relationships(snapshot.people)
        console.print(f"  [yellow]![/yellow] Inferred {len(relationships)} relationships from contact data")

    return NetworkAnalyzer(snapshot.people, relationships, config=config)


def _fail(message: str) -> None:
    console.print(f"[red]Error: {message}[/red]")
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option(
    "--config", "-c",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to config.yaml",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, config_path: Optional[str]) -> None:
    """Contact Network Analysis - centrality, communities and introductions for your contacts."""
    from contact_network.utils.config import load_config

    ctx.ensure_object(dict)
    config = load_config(Path(config_path) if config_path else None)
    ctx.obj["config"] = config

    if verbose:
        ctx.obj["log_level"] = "DEBUG"
    elif quiet:
        ctx.obj["log_level"] = "WARNING"
    else:
        ctx.obj["log_level"] = config.logging.level

    setup_logging(ctx.obj["log_level"], config.logging.file)


@cli.command()
@click.option(
    "--input", "-i",
    "input_path",
    required=True,
    type=click.Path(exists=True),
    help="Directory with contacts.csv/relationships.csv, or a JSON snapshot",
)
@click.option(
    "--output", "-o",
    "output_dir",
    default=None,
    type=click.Path(file_okay=False, dir_okay=True),
    help="Output directory for reports",
)
@click.option(
    "--format", "-f",
    "formats",
    multiple=True,
    type=click.Choice(["csv", "markdown", "json"]),
    default=None,
    help="Output formats to generate",
)
@click.option("--focus", default=None, help="Only report people around this contact ID")
@click.option("--infer", is_flag=True, help="Infer relationships when the snapshot has none")
@click.pass_context
def analyze(
    ctx: click.Context,
    input_path: str,
    output_dir: Optional[str],
    formats: tuple[str, ...],
    focus: Optional[str],
    infer: bool,
) -> None:
    """Analyse a snapshot and generate network reports."""
    from contact_network.models.analyzer import focus_result
    from contact_network.pipeline.outputs import OutputGenerator

    config = ctx.obj["config"]

    console.print("\n[bold blue]Contact Network Analysis[/bold blue]")
    console.print("=" * 50)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Loading snapshot...", total=None)
        analyzer = _load_analyzer(ctx, input_path, infer=infer)
        progress.update(task, completed=True)
        console.print(
            f"  [green]✓[/green] Loaded {len(analyzer.graph)} people, "
            f"{analyzer.graph.edge_count} connections"
        )

        task = progress.add_task("Analysing network...", total=None)
        result = analyzer.analyze()
        progress.update(task, completed=True)
        console.print(f"  [green]✓[/green] Found {len(result.communities)} communities")

        if focus:
            try:
                result = focus_result(result, focus, depth=config.processing.focus_depth)
            except ValueError as e:
                _fail(str(e))
            console.print(f"  [green]✓[/green] Focused on {focus}: {len(result.nodes)} people")

        task = progress.add_task("Generating reports...", total=None)
        generator = OutputGenerator(
            output_dir=output_dir or config.output.directory,
            formats=list(formats) or config.output.formats,
            timestamp_filenames=config.output.timestamp_filenames,
            max_items_per_section=config.output.markdown.get("max_items_per_section", 20),
            include_methodology=config.output.markdown.get("include_methodology", True),
        )
        output_files = {
            "network_metrics": generator.generate_network_metrics(result),
            "communities": generator.generate_communities(result),
            "network_summary": generator.generate_network_summary(result),
        }
        progress.update(task, completed=True)

    console.print("\n[bold]Reports Generated:[/bold]")
    for report_type, files in output_files.items():
        for fmt, path in files.items():
            console.print(f"  • {report_type}.{fmt}: [cyan]{path}[/cyan]")

    console.print("\n[bold]Top 5 People by Network Value:[/bold]")
    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Company")
    table.add_column("Value", justify="right")
    table.add_column("Degree", justify="right")
    table.add_column("PageRank", justify="right")

    for node in result.get_top_nodes(5):
        table.add_row(
            node.display_name,
            node.company or "Unknown",
            str(node.network_value),
            str(node.degree),
            f"{node.page_rank:.3f}",
        )

    console.print(table)
    console.print()


@cli.command()
@click.option(
    "--input", "-i",
    "input_path",
    required=True,
    type=click.Path(exists=True),
    help="Directory with contacts.csv/relationships.csv, or a JSON snapshot",
)
@click.option("--id", "contact_id", required=True, help="Contact ID to analyse")
@click.option(
    "--output", "-o",
    "output_dir",
    default=None,
    type=click.Path(file_okay=False, dir_okay=True),
    help="Output directory for reports",
)
@click.option("--infer", is_flag=True, help="Infer relationships when the snapshot has none")
@click.pass_context
def contact(
    ctx: click.Context,
    input_path: str,
    contact_id: str,
    output_dir: Optional[str],
    infer: bool,
) -> None:
    """Analyse the network around one contact."""
    from contact_network.pipeline.outputs import OutputGenerator

    config = ctx.obj["config"]
    analyzer = _load_analyzer(ctx, input_path, infer=infer)

    try:
        analysis = analyzer.analyze_contact(contact_id)
    except ValueError as e:
        _fail(str(e))

    generator = OutputGenerator(
        output_dir=output_dir or config.output.directory,
        formats=["markdown", "json"],
        timestamp_filenames=config.output.timestamp_filenames,
    )
    output_files = generator.generate_contact_report(analysis)

    person = analysis.contact
    stats = analysis.statistics
    console.print(f"\n[bold blue]{person.display_name}[/bold blue] ({person.company or 'Unknown'})")
    console.print("=" * 50)

    table = Table(show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Network value", str(person.network_value))
    table.add_row("Degree", str(person.degree))
    table.add_row("Betweenness", f"{person.betweenness:.3f}")
    table.add_row("Closeness", f"{person.closeness:.3f}")
    table.add_row("PageRank", f"{person.page_rank:.3f}")
    table.add_row("Second-degree connections", str(stats.total_second_degree_connections))
    table.add_row(f"Reachable within {config.processing.reachable_depth} hops", str(stats.reachable_contacts))
    console.print(table)

    if analysis.paths_to_hubs:
        console.print("\n[bold]Paths to hub people:[/bold]")
        for hp in analysis.paths_to_hubs:
            console.print(f"  • {' → '.join(hp.path)} [dim]({hp.distance} hops)[/dim]")

    console.print(f"\n[dim]Full report: {output_files.get('markdown', 'N/A')}[/dim]")


@cli.command()
@click.option(
    "--input", "-i",
    "input_path",
    required=True,
    type=click.Path(exists=True),
    help="Directory with contacts.csv/relationships.csv, or a JSON snapshot",
)
@click.option("--id", "contact_id", required=True, help="Contact ID to recommend for")
@click.option("--limit", "-n", default=None, type=int, help="Maximum recommendations")
@click.pass_context
def recommend(ctx: click.Context, input_path: str, contact_id: str, limit: Optional[int]) -> None:
    """Suggest new connections for a contact."""
    analyzer = _load_analyzer(ctx, input_path)

    try:
        recommendations = analyzer.recommend(contact_id, limit)
    except ValueError as e:
        _fail(str(e))

    if not recommendations:
        console.print(f"\n[yellow]No recommendations for {contact_id}[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Company")
    table.add_column("Shared", justify="right")
    table.add_column("Score", justify="right")

    for i, r in enumerate(recommendations, 1):
        person = analyzer.graph.get_person(r.person_id)
        table.add_row(
            str(i),
            person.display_name,
            person.company or "Unknown",
            str(len(r.shared_neighbors)),
            f"{r.score:.1f}",
        )

    console.print(table)


@cli.command()
@click.option(
    "--input", "-i",
    "input_path",
    required=True,
    type=click.Path(exists=True),
    help="Directory with contacts.csv/relationships.csv, or a JSON snapshot",
)
@click.option("--limit", "-n", default=None, type=int, help="Maximum hub people")
@click.pass_context
def hubs(ctx: click.Context, input_path: str, limit: Optional[int]) -> None:
    """List hub people (high PageRank and high betweenness)."""
    analyzer = _load_analyzer(ctx, input_path)

    try:
        hub_ids = analyzer.find_hub_persons(limit)
    except ValueError as e:
        _fail(str(e))

    if not hub_ids:
        console.print("\n[yellow]No hub people found[/yellow]")
        return

    scores = analyzer.scores
    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Company")
    table.add_column("PageRank", justify="right")
    table.add_column("Betweenness", justify="right")

    for hub_id in hub_ids:
        person = analyzer.graph.get_person(hub_id)
        table.add_row(
            person.display_name,
            person.company or "Unknown",
            f"{scores.page_rank[hub_id]:.3f}",
            f"{scores.betweenness[hub_id]:.3f}",
        )

    console.print(table)


@cli.command()
@click.option(
    "--input", "-i",
    "input_path",
    required=True,
    type=click.Path(exists=True),
    help="Directory with contacts.csv/relationships.csv, or a JSON snapshot",
)
@click.option("--from", "source", required=True, help="Start contact ID")
@click.option("--to", "target", required=True, help="Target contact ID")
@click.pass_context
def path(ctx: click.Context, input_path: str, source: str, target: str) -> None:
    """Show the shortest introduction path between two contacts."""
    analyzer = _load_analyzer(ctx, input_path)
    hops = analyzer.shortest_path(source, target)

    if not hops:
        console.print(f"\n[yellow]No path from {source} to {target}[/yellow]")
        return

    names = [analyzer.graph.get_person(node_id).display_name for node_id in hops]
    console.print(f"\n{' → '.join(names)} [dim]({len(hops) - 1} hops)[/dim]")


@cli.command()
@click.option(
    "--input", "-i",
    "input_path",
    required=True,
    type=click.Path(exists=True),
    help="Directory with contacts.csv/relationships.csv, or a JSON snapshot",
)
@click.pass_context
def stats(ctx: click.Context, input_path: str) -> None:
    """Show quick statistics about a snapshot."""
    from contact_network.models.centrality import top_nodes
    from contact_network.models.statistics import calculate_statistics

    analyzer = _load_analyzer(ctx, input_path)
    network_stats = calculate_statistics(analyzer.graph, analyzer.scores.degree)

    console.print("\n[bold blue]Network Statistics[/bold blue]")
    console.print("=" * 50)

    table = Table(show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("People", str(network_stats.total_nodes))
    table.add_row("Connections", str(network_stats.total_edges))
    table.add_row("Average degree", f"{network_stats.avg_degree:.2f}")
    table.add_row("Density", f"{network_stats.density:.3f}")
    table.add_row("Clustering coefficient", f"{network_stats.clustering_coefficient:.3f}")
    table.add_row("Diameter", str(network_stats.diameter))
    console.print(table)

    bridges = top_nodes(analyzer.scores.betweenness, 5)
    if bridges:
        console.print("\n[bold]Top Bridges:[/bold]")
        for node_id in bridges:
            person = analyzer.graph.get_person(node_id)
            console.print(f"  • {person.display_name}: {analyzer.scores.betweenness[node_id]:.3f}")

    console.print()


@cli.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Show version information."""
    from contact_network import __version__

    console.print(f"Contact Network Analysis v{__version__}")


def main() -> None:
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
