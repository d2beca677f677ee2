"""
Main Application Entry Point.

This module serves as the primary entry point for the development scan.
It orchestrates the workflow, including:
- GitHub client and rate limiter initialization
- Repository resolution and development scoring for each configured project
- Report directory management and PDF report generation

Failed projects are logged and reported as unknown; they don't stop execution.
"""

import asyncio
import os

from config import settings, logger
from analyzers.development import DevelopmentActivityScorer
from analyzers.multi_token import MultiTokenAnalyzer
from miners.github_miner import GitHubMiner, RepositoryMiner
from miners.rate_limiter import RateLimiter
from resolvers.repository_resolver import RepositoryResolver
from storage.score_store import ScoreStore
from report.pdf_generator import PDFReportGenerator
from visualization.plotter import DevelopmentScorePlotter


async def main() -> None:
    """
    Execute the main application workflow.

    Performs the following steps:
    1. Creates output directory for reports if it doesn't exist
    2. Builds the GitHub miner, resolver, scorer and score store
    3. Scores all configured token projects
    4. Generates the PDF report
    """
    logger.info("Starting development scan...")

    token_urls = settings.token_urls
    if not token_urls:
        logger.warning("No GitHub URLs configured, set GITHUB_URLS")
        return

    if settings.github_token is None:
        logger.warning("No GitHub token configured, using unauthenticated API limits")

    os.makedirs(settings.report_output_dir, exist_ok=True)

    logger.debug("initializing github miner...")
    rate_limiter = RateLimiter(settings.github_max_requests, settings.github_rate_period)
    github_miner: RepositoryMiner = GitHubMiner(rate_limiter=rate_limiter)

    logger.debug("initializing repository resolver...")
    resolver = RepositoryResolver(github_miner.fetch_owner_repositories)

    store = ScoreStore(settings.data_dir)
    multi_analyzer = MultiTokenAnalyzer(
        store, resolver, github_miner, DevelopmentActivityScorer(), token_urls
    )

    logger.info("analyzing token projects...")
    results = await multi_analyzer.analyze_tokens()

    logger.info("generating report...")
    temp_plot_dir = os.path.join(settings.report_output_dir, "temp_plots")
    plotter = DevelopmentScorePlotter(temp_plot_dir)
    pdf_generator = PDFReportGenerator(plotter)
    report_file = pdf_generator.generate_report(results, settings.report_output_dir)

    logger.info({"message": "application finished", "report": report_file})


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    logger.info("Starting application ...")
    run()
