"""
Output Generation

Generates CSV, Markdown, and JSON reports from network analysis results.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from contact_network.models.entities import (
    Community,
    ContactAnalysis,
    NetworkAnalysisResult,
    Person,
)

logger = logging.getLogger(__name__)


def _csv_text(value: Optional[str]) -> str:
    return '"' + (value or "").replace('"', '""') + '"'


class OutputGenerator:
    """Generates various output formats from analysis results."""

    def __init__(
        self,
        output_dir: str | Path = "./outputs",
        formats: Optional[list[str]] = None,
        timestamp_filenames: bool = True,
        max_items_per_section: int = 20,
        include_methodology: bool = True,
    ):
        """Initialize output generator.

        Args:
            output_dir: Directory for output files
            formats: List of formats to generate (csv, markdown, json)
            timestamp_filenames: Whether to include timestamp in filenames
            max_items_per_section: Maximum items per report section
            include_methodology: Whether to include methodology in reports
        """
        self.output_dir = Path(output_dir)
        self.formats = formats or ["csv", "markdown", "json"]
        self.timestamp_filenames = timestamp_filenames
        self.max_items_per_section = max_items_per_section
        self.include_methodology = include_methodology

        self.output_dir.mkdir(parents=True, exist_ok=True)

    def _get_filename(self, base_name: str, extension: str) -> Path:
        """Generate output filename."""
        if self.timestamp_filenames:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"{base_name}_{timestamp}.{extension}"
        else:
            filename = f"{base_name}.{extension}"
        return self.output_dir / filename

    def _nodes_to_csv(self, nodes: list[Person]) -> str:
        """Convert analysed people to CSV format."""
        lines = [
            "id,name,company,position,importance,degree,betweenness,"
            "closeness,page_rank,network_value"
        ]

        for node in nodes:
            lines.append(
                f"{_csv_text(node.id)},"
                f"{_csv_text(node.display_name)},"
                f"{_csv_text(node.company)},"
                f"{_csv_text(node.position)},"
                f"{node.importance},"
                f"{node.degree},"
                f"{node.betweenness:.4f},"
                f"{node.closeness:.4f},"
                f"{node.page_rank:.4f},"
                f"{node.network_value}"
            )

        return "\n".join(lines)

    def _communities_to_csv(self, communities: list[Community]) -> str:
        """Convert communities to CSV format."""
        lines = ["id,name,size,density,central_members,members"]

        for c in communities:
            lines.append(
                f"{_csv_text(c.id)},"
                f"{_csv_text(c.name)},"
                f"{c.size},"
                f"{c.density:.3f},"
                f"{_csv_text(';'.join(c.central_members))},"
                f"{_csv_text(';'.join(c.members))}"
            )

        return "\n".join(lines)

    def _generate_metrics_md(self, result: NetworkAnalysisResult) -> str:
        """Generate network metrics markdown report."""
        lines = ["# Network Value Report\n"]

        if self.include_methodology:
            lines.extend([
                "## Methodology\n",
                "Network value blends centrality with contact importance:\n",
                "- **Degree**: direct connections x average neighbor importance x 10",
                "- **Betweenness**: share of shortest paths bridged x 100",
                "- **PageRank**: influence from well-connected neighbors x 200",
                "- **Importance**: own importance rating x 20\n",
            ])

        lines.extend([
            f"*Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}*\n",
            f"*Total people: {result.statistics.total_nodes}*\n",
        ])

        lines.extend([
            "\n## Top People\n",
            "| Rank | Name | Company | Value | Degree | Betweenness | PageRank |",
            "|------|------|---------|-------|--------|-------------|----------|",
        ])

        for i, node in enumerate(result.get_top_nodes(self.max_items_per_section), 1):
            lines.append(
                f"| {i} | {node.display_name} | {node.company or 'Unknown'} | "
                f"{node.network_value} | {node.degree} | "
                f"{node.betweenness:.3f} | {node.page_rank:.3f} |"
            )

        return "\n".join(lines)

    def _generate_communities_md(self, result: NetworkAnalysisResult) -> str:
        """Generate communities markdown report."""
        lines = ["# Communities\n"]

        if self.include_methodology:
            lines.extend([
                "## Methodology\n",
                "Communities grow from each unassigned person along connections to",
                "colleagues at the same company or relationships stronger than the",
                "strong-tie threshold. Single people are not reported.\n",
            ])

        lines.append(f"*Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}*\n")

        if not result.communities:
            lines.append("\n*No communities found.*\n")
            return "\n".join(lines)

        names = {node.id: node.display_name for node in result.nodes}

        for c in result.communities[:self.max_items_per_section]:
            central = ", ".join(names.get(m, m) for m in c.central_members)
            lines.extend([
                f"\n## {c.name}\n",
                f"- **Members**: {c.size}",
                f"- **Density**: {c.density:.0%}",
                f"- **Central members**: {central or 'N/A'}\n",
            ])

        return "\n".join(lines)

    def _generate_summary_md(self, result: NetworkAnalysisResult) -> str:
        """Generate network summary markdown report."""
        stats = result.statistics
        lines = ["# Network Summary\n"]

        lines.extend([
            f"*Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}*\n",
            "\n## Network Overview\n",
            f"- **People**: {stats.total_nodes}",
            f"- **Connections**: {stats.total_edges}",
            f"- **Average degree**: {stats.avg_degree:.2f}",
            f"- **Density**: {stats.density:.3f}",
            f"- **Clustering coefficient**: {stats.clustering_coefficient:.3f}",
            f"- **Diameter**: {stats.diameter}",
            f"- **Communities**: {len(result.communities)}\n",
        ])

        return "\n".join(lines)

    def _generate_contact_md(self, analysis: ContactAnalysis) -> str:
        """Generate single-contact markdown report."""
        contact = analysis.contact
        stats = analysis.statistics
        lines = [f"# {contact.display_name}\n"]

        lines.extend([
            f"*Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}*\n",
            f"**Company**: {contact.company or 'Unknown'}",
            f"**Position**: {contact.position or 'Unknown'}",
            f"**Network value**: {contact.network_value}\n",
            "\n## Network\n",
            f"- **Direct connections**: {stats.total_direct_connections}",
            f"- **Second-degree connections**: {stats.total_second_degree_connections}",
            f"- **Average connection strength**: {stats.average_connection_strength:.1f}",
            f"- **Companies**: {stats.companies_count}",
            f"- **Reachable contacts**: {stats.reachable_contacts}\n",
        ])

        if analysis.direct_connections:
            lines.extend([
                "\n## Direct Connections\n",
                "| Name | Company | Type | Strength |",
                "|------|---------|------|----------|",
            ])
            for dc in analysis.direct_connections[:self.max_items_per_section]:
                lines.append(
                    f"| {dc.person.display_name} | {dc.person.company or 'Unknown'} | "
                    f"{dc.relationship.type.value} | {dc.relationship.strength:.0f} |"
                )

        if analysis.industries:
            lines.extend([
                "\n## Industries\n",
                "| Industry | Connections | Average strength | Contacts |",
                "|----------|-------------|------------------|----------|",
            ])
            for ind in analysis.industries:
                lines.append(
                    f"| {ind.name} | {ind.count} | {ind.average_strength:.1f} | "
                    f"{', '.join(ind.contacts)} |"
                )

        if analysis.recommended:
            lines.extend([
                "\n## Recommended Connections\n",
                "| Person | Score | Shared connections |",
                "|--------|-------|--------------------|",
            ])
            for r in analysis.recommended[:self.max_items_per_section]:
                lines.append(f"| {r.person_id} | {r.score:.1f} | {len(r.shared_neighbors)} |")

        if analysis.paths_to_hubs:
            lines.append("\n## Paths to Hub People\n")
            for hp in analysis.paths_to_hubs:
                lines.append(f"- **{hp.hub_id}** ({hp.distance} hops): {' -> '.join(hp.path)}")

        return "\n".join(lines)

    def generate_network_metrics(self, result: NetworkAnalysisResult) -> dict[str, Path]:
        """Generate per-person metrics reports.

        Returns:
            Dictionary of format -> filepath
        """
        generated = {}

        sorted_nodes = sorted(result.nodes, key=lambda n: n.network_value, reverse=True)

        if "csv" in self.formats:
            filepath = self._get_filename("network_metrics", "csv")
            filepath.write_text(self._nodes_to_csv(sorted_nodes))
            generated["csv"] = filepath

        if "markdown" in self.formats:
            filepath = self._get_filename("network_metrics", "md")
            filepath.write_text(self._generate_metrics_md(result))
            generated["markdown"] = filepath

        if "json" in self.formats:
            json_data = [node.model_dump(mode="json") for node in sorted_nodes]
            filepath = self._get_filename("network_metrics", "json")
            filepath.write_text(json.dumps(json_data, indent=2))
            generated["json"] = filepath

        logger.info(f"Generated network metrics reports: {list(generated.keys())}")
        return generated

    def generate_communities(self, result: NetworkAnalysisResult) -> dict[str, Path]:
        """Generate community reports."""
        generated = {}

        if "csv" in self.formats:
            filepath = self._get_filename("communities", "csv")
            filepath.write_text(self._communities_to_csv(result.communities))
            generated["csv"] = filepath

        if "markdown" in self.formats:
            filepath = self._get_filename("communities", "md")
            filepath.write_text(self._generate_communities_md(result))
            generated["markdown"] = filepath

        if "json" in self.formats:
            json_data = [c.model_dump(mode="json") for c in result.communities]
            filepath = self._get_filename("communities", "json")
            filepath.write_text(json.dumps(json_data, indent=2))
            generated["json"] = filepath

        logger.info(f"Generated community reports: {list(generated.keys())}")
        return generated

    def generate_network_summary(self, result: NetworkAnalysisResult) -> dict[str, Path]:
        """Generate network summary report, including the full result as JSON."""
        generated = {}

        if "markdown" in self.formats:
            filepath = self._get_filename("network_summary", "md")
            filepath.write_text(self._generate_summary_md(result))
            generated["markdown"] = filepath

        if "json" in self.formats:
            filepath = self._get_filename("network_summary", "json")
            filepath.write_text(result.model_dump_json(indent=2))
            generated["json"] = filepath

        logger.info(f"Generated network summary reports: {list(generated.keys())}")
        return generated

    def generate_contact_report(self, analysis: ContactAnalysis) -> dict[str, Path]:
        """Generate reports for a single contact."""
        generated = {}

        safe_id = "".join(c if c.isalnum() else "_" for c in analysis.contact.id)

        if "markdown" in self.formats:
            filepath = self._get_filename(f"contact_{safe_id}", "md")
            filepath.write_text(self._generate_contact_md(analysis))
            generated["markdown"] = filepath

        if "json" in self.formats:
            filepath = self._get_filename(f"contact_{safe_id}", "json")
            filepath.write_text(analysis.model_dump_json(indent=2))
            generated["json"] = filepath

        logger.info(f"Generated contact reports for {analysis.contact.id}: {list(generated.keys())}")
        return generated


def generate_outputs(
    result: NetworkAnalysisResult,
    output_dir: str | Path = "./outputs",
    formats: Optional[list[str]] = None,
    timestamp_filenames: bool = True,
) -> dict[str, dict[str, Path]]:
    """Convenience function to generate all network reports.

    Args:
        result: Analysis result
        output_dir: Output directory
        formats: Formats to generate
        timestamp_filenames: Whether to include timestamp in filenames

    Returns:
        Dictionary of report_type -> format -> filepath
    """
    generator = OutputGenerator(
        output_dir=output_dir,
        formats=formats or ["csv", "markdown", "json"],
        timestamp_filenames=timestamp_filenames,
    )

    return {
        "network_metrics": generator.generate_network_metrics(result),
        "communities": generator.generate_communities(result),
        "network_summary": generator.generate_network_summary(result),
    }
