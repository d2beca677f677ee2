"""
PDF Report Generation Module.

This module generates the development score PDF report for a batch of token
projects. Features include:
- Summary table of development scores per project
- Bar chart of development scores
- Per-repository metrics tables

Uses ReportLab for PDF generation. Projects whose score is unknown are listed
as "n/a", never as zero.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional
import os

from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib import colors
from reportlab.lib.units import inch
from reportlab.lib.pagesizes import letter
from reportlab.platypus import (
    SimpleDocTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
    Image,
)

from config import logger
from analyzers.models import DevelopmentScoreResult
from visualization.plotter import DevelopmentScorePlotter

NOT_AVAILABLE = "n/a"

HEADER_STYLE = [
    ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
    ("ALIGN", (0, 0), (-1, -1), "CENTER"),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("BACKGROUND", (0, 1), (-1, -1), colors.beige),
    ("GRID", (0, 0), (-1, -1), 1, colors.black),
]


class PDFReportGenerator:
    """
    Generates the development score PDF report.

    Attributes:
        styles (getSampleStyleSheet): ReportLab styles for document formatting.
        plotter (DevelopmentScorePlotter): Instance for creating the score chart.
    """

    def __init__(self, plotter: DevelopmentScorePlotter):
        """Initialize the PDF generator with visualization capabilities.

        Args:
            plotter (DevelopmentScorePlotter): Instance for creating the score chart.
        """
        self.styles = getSampleStyleSheet()
        self.plotter = plotter

    def _summary_rows(
        self, results: Dict[str, Optional[DevelopmentScoreResult]]
    ) -> List[list]:
        rows = [["Project", "Repository", "Development"]]
        for url, result in results.items():
            if result is None:
                rows.append([url, NOT_AVAILABLE, NOT_AVAILABLE])
                continue
            rows.append([url, result.repository_name, result.score])
        return rows

    def _create_summary_table(
        self, results: Dict[str, Optional[DevelopmentScoreResult]]
    ) -> Table:
        """Create the per-project score table.

        Args:
            results (Dict[str, Optional[DevelopmentScoreResult]]): URL to score.

        Returns:
            Table: Formatted ReportLab table.
        """
        data = self._summary_rows(results)
        table = Table(data, colWidths=[3.2 * inch, 2.4 * inch, 1.2 * inch])
        table.setStyle(TableStyle(HEADER_STYLE + [("FONTSIZE", (0, 0), (-1, -1), 8)]))
        return table

    def _create_metrics_table(self, result: DevelopmentScoreResult) -> Table:
        """Create a table showing the metrics behind one repository's score.

        Args:
            result (DevelopmentScoreResult): Scored repository.

        Returns:
            Table: Formatted ReportLab table with repository metrics.
        """
        metrics = result.metrics
        last_push = (
            metrics.last_pushed_at.strftime("%Y-%m-%d")
            if metrics.last_pushed_at
            else "never"
        )
        data = [
            ["Metric", "Value"],
            ["Development Score", result.score],
            ["Stars", metrics.star_count],
            ["Forks", metrics.fork_count],
            ["Commits (30 days)", metrics.commits_last_30_days],
            ["Contributors", metrics.contributors_count],
            ["Open Issues", metrics.open_issues_count],
            ["Closed Issues", metrics.closed_issues_count],
            ["Last Push", last_push],
            ["Archived", "yes" if metrics.is_archived else "no"],
            ["Fork", "yes" if metrics.is_fork else "no"],
            ["Language", metrics.language or NOT_AVAILABLE],
            ["Scored At", result.scored_at.strftime("%Y-%m-%d %H:%M:%S")],
        ]

        table = Table(data, colWidths=[3 * inch, 2 * inch])
        table.setStyle(TableStyle(HEADER_STYLE))
        return table

    def generate_report(
        self,
        results: Dict[str, Optional[DevelopmentScoreResult]],
        output_path: str,
    ) -> str:
        """Generate the development score report.

        Args:
            results (Dict[str, Optional[DevelopmentScoreResult]]): URL to score,
                None for unknown scores.
            output_path (str): Directory where the PDF report should be saved.

        Returns:
            str: Path of the generated PDF.

        Raises:
            Exception: If report generation fails.
        """
        report_date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        report_file = os.path.join(output_path, f"development_report_{report_date}.pdf")
        plot_files: List[str] = []

        try:
            logger.info(
                {
                    "message": "Starting PDF report generation",
                    "projects": len(results),
                    "output_path": report_file,
                }
            )
            doc = SimpleDocTemplate(report_file, pagesize=letter)
            elements = [
                Paragraph("Token Development Health Report", self.styles["Heading1"]),
                Spacer(1, 20),
                Paragraph("Summary", self.styles["Heading2"]),
                Spacer(1, 10),
                self._create_summary_table(results),
                Spacer(1, 30),
            ]

            scored = [result for result in results.values() if result is not None]
            fig = self.plotter.create_score_plot(
                {result.repository_name: result.score for result in scored}
            )
            if fig is not None:
                plot_path = self.plotter.save_plot(
                    fig, f"development_scores_{report_date}.png"
                )
                plot_files.append(plot_path)
                elements.extend(
                    [
                        Paragraph("Development Scores", self.styles["Heading2"]),
                        Spacer(1, 10),
                        Image(plot_path, width=6.5 * inch, height=4 * inch),
                        Spacer(1, 30),
                    ]
                )

            for result in scored:
                elements.extend(
                    [
                        Paragraph(result.repository_name, self.styles["Heading2"]),
                        Spacer(1, 10),
                        self._create_metrics_table(result),
                        Spacer(1, 30),
                    ]
                )

            doc.build(elements)
            logger.info(
                {
                    "message": "PDF report generated successfully",
                    "output_path": report_file,
                }
            )
            return report_file

        except Exception as e:
            logger.error(
                {
                    "message": "PDF report generation failed",
                    "error": str(e),
                    "output_path": report_file,
                }
            )
            raise

        finally:
            for plot_file in plot_files:
                if os.path.exists(plot_file):
                    os.remove(plot_file)
