"""Four panel figure of an experiment: PDF, CDF, batch means, statistics.

Needs matplotlib (``pip install clt-montecarlo[plot]``). The figure is built
with the object oriented ``matplotlib.figure.Figure`` API, so no GUI backend
is required to render or save it.
"""

from typing import TYPE_CHECKING, Optional

import numpy as np

from .report import format_statistics

if TYPE_CHECKING:
    from matplotlib.figure import Figure

    from . import ExperimentResult

# Points used to draw the smooth PDF curve
CURVE_POINTS = 500


def _require_matplotlib():
    try:
        from matplotlib.figure import Figure
    except ImportError:
        raise ImportError(
            "matplotlib is required for plotting. Install with: "
            "pip install clt-montecarlo[plot]"
        ) from None
    return Figure


def plot_result(
    result: "ExperimentResult",
    path: Optional[str] = None,
    bins: Optional[int] = None,
    dpi: int = 100,
) -> "Figure":
    """Draw an experiment on a 2x2 grid and optionally save it.

    Args:
        result: Output of ``CentralLimitExperiment.run``
        path: If given, the figure is written there (format from extension)
        bins: Histogram bins for the batch means (default: ``numpoints``)
        dpi: Resolution used when saving

    Returns:
        The matplotlib Figure
    """
    Figure = _require_matplotlib()
    config = result.config
    fig = Figure(figsize=(10, 8))
    axes = fig.subplots(2, 2)

    # PDF
    ax = axes[0, 0]
    if result.normalized is not None:
        xs = np.linspace(config.xmin, config.xmax, CURVE_POINTS)
        ax.plot(xs, result.normalized.evaluate(xs), color="tab:blue", lw=1.5)
    ax.set_title("Probability Density Function")
    ax.set_xlabel("x")
    ax.grid(alpha=0.4)

    # CDF
    ax = axes[0, 1]
    ax.plot(result.cdf.x, result.cdf.y, color="tab:green", lw=1.5)
    ax.set_title("Cumulative Distribution Function")
    ax.set_xlabel("x")
    ax.set_ylim(0.0, 1.05)
    ax.grid(alpha=0.4)

    # Batch means with the predicted normal curve
    ax = axes[1, 0]
    n_bins = bins if bins is not None else config.numpoints
    counts, edges = result.empirical.histogram(
        bins=n_bins, range=(config.xmin, config.xmax)
    )
    ax.stairs(counts, edges, fill=True, color="tab:orange", alpha=0.7, label="averages")

    mu = result.predicted_mean
    sigma = result.predicted_stdev
    if sigma > 0:
        bin_width = edges[1] - edges[0]
        xs = np.linspace(mu - 5 * sigma, mu + 5 * sigma, CURVE_POINTS)
        gauss = np.exp(-0.5 * ((xs - mu) / sigma) ** 2) / (sigma * np.sqrt(2 * np.pi))
        ax.plot(
            xs,
            gauss * len(result.empirical) * bin_width,
            color="black",
            lw=1.0,
            label="predicted normal",
        )
        ax.set_xlim(mu - 6 * sigma, mu + 6 * sigma)
    ax.set_title("Average Results")
    ax.set_xlabel("batch mean")
    ax.set_ylabel("count")
    ax.legend(fontsize=8)

    # Statistics table
    ax = axes[1, 1]
    ax.axis("off")
    ax.text(
        0.05,
        0.95,
        format_statistics(result, precision=4),
        transform=ax.transAxes,
        ha="left",
        va="top",
        family="monospace",
        fontsize=10,
    )

    fig.suptitle(
        f"Central limit theorem: {config.pdf_name}, "
        f"{config.num_means} means of {config.num_iterations} samples"
    )
    fig.tight_layout()

    if path is not None:
        fig.savefig(path, dpi=dpi)
    return fig
