"""Plain text summary of an experiment."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from . import ExperimentResult


def format_statistics(result: "ExperimentResult", precision: int = 6) -> str:
    """Render predicted against experimental mean and stdev as a table.

    Example output::

        STATISTICS
                   Predicted  Experimental
        Mean:       7.500000      7.486012
        Stdev:      0.193649      0.193521
    """
    width = precision + 8
    lines = [
        "STATISTICS",
        f"{'':<7}{'Predicted':>{width}}{'Experimental':>{width}}",
        f"{'Mean:':<7}{result.predicted_mean:>{width}.{precision}f}"
        f"{result.empirical_mean:>{width}.{precision}f}",
        f"{'Stdev:':<7}{result.predicted_stdev:>{width}.{precision}f}"
        f"{result.empirical_stdev:>{width}.{precision}f}",
    ]
    return "\n".join(lines)


def format_run_summary(result: "ExperimentResult") -> str:
    """One line describing how the numbers were produced."""
    config = result.config
    empirical = result.empirical
    return (
        f"pdf={config.pdf_name} domain=[{config.xmin:g}, {config.xmax:g}] "
        f"numpoints={config.numpoints} num_iterations={config.num_iterations} "
        f"num_means={config.num_means} seed={config.seed} "
        f"policy={config.policy} out_of_range={empirical.out_of_range}"
    )
