"""
Development Score Visualization Module.

Creates the charts embedded in the development score report and handles plot
file management.
"""

from typing import Dict, Optional
import os

import matplotlib.pyplot as plt
import pandas as pd


class DevelopmentScorePlotter:
    """
    Plotter for development score charts.

    Attributes:
        output_dir (str): Directory for saving generated plots
    """

    def __init__(self, output_dir: str = "plots"):
        """
        Initialize the plotter with output configuration.

        Args:
            output_dir (str): Directory path for saving generated plots.
                Defaults to "plots"
        """
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)

    def create_score_plot(self, scores: Dict[str, int]) -> Optional[plt.Figure]:
        """Create a horizontal bar chart of development scores.

        Args:
            scores (Dict[str, int]): Repository name to development score

        Returns:
            Optional[plt.Figure]: Chart figure, None when there is nothing to plot
        """
        if not scores:
            return None

        series = pd.Series(scores, dtype="int64").sort_values()
        colors = [
            "tab:green" if score >= 70 else "tab:orange" if score >= 40 else "tab:red"
            for score in series
        ]

        fig, ax = plt.subplots(figsize=(10, max(3, 0.5 * len(series) + 1)))
        series.plot.barh(ax=ax, color=colors)
        ax.set_title("Development Scores")
        ax.set_xlabel("Score")
        ax.set_xlim(0, 100)
        ax.grid(True, axis="x")
        for position, score in enumerate(series):
            ax.text(score + 1, position, str(score), va="center")

        plt.tight_layout()
        return fig

    def save_plot(self, fig: plt.Figure, file_name: str) -> str:
        """Save a figure as PNG in the output directory and close it.

        Args:
            fig (plt.Figure): Figure to save
            file_name (str): File name inside the output directory

        Returns:
            str: Path of the written file
        """
        plot_path = os.path.join(self.output_dir, file_name)
        fig.savefig(plot_path, format="png", dpi=200, bbox_inches="tight")
        plt.close(fig)
        return plot_path
