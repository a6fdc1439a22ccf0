#!/usr/bin/env python3
"""Draw the four panel figure for the default lopsided density."""

from clt_montecarlo import CentralLimitExperiment, ExperimentConfig
from clt_montecarlo.plotting import plot_result

config = ExperimentConfig(pdf="lopsided", streams="per_trial", n_workers=4)

if __name__ == "__main__":
    result = CentralLimitExperiment(config).run()
    plot_result(result, path="plot.png")
    print("Saved plot.png")
