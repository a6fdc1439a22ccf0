#!/usr/bin/env python3
"""Run every built-in density and plot how fast the batch means settle.

For each preset the batch size is increased and the gap between the
empirical and predicted standard deviation of the batch means is recorded.
"""

import time

from matplotlib import pyplot as plt

from clt_montecarlo import PRESETS, CentralLimitExperiment, ExperimentConfig

BATCH_SIZES = [1, 2, 5, 10, 20, 50, 100]
NUM_MEANS = 5000

fig, ax = plt.subplots(figsize=(8, 5))

for name in sorted(PRESETS):
    gaps = []
    start = time.time()
    for batch in BATCH_SIZES:
        config = ExperimentConfig(pdf=name, num_iterations=batch, num_means=NUM_MEANS)
        result = CentralLimitExperiment(config).run()
        gaps.append(abs(result.empirical_stdev / result.predicted_stdev - 1.0))
    print(f"{name:>10}: {time.time() - start:.2f} s, last gap {gaps[-1]:.4f}")
    ax.plot(BATCH_SIZES, gaps, marker="o", label=name)

ax.set_xscale("log")
ax.set_xlabel("batch size (num_iterations)")
ax.set_ylabel("|empirical / predicted stdev - 1|")
ax.set_title("Batch mean spread against the CLT prediction")
ax.legend()
ax.grid(alpha=0.4)
plt.show()
