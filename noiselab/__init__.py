"""
noiselab: Monte Carlo experiments on colored and low-discrepancy noise.

A generator turns (count, stream index, run seed) into a sequence of samples
in [0, 1). An experiment scores many such sequences under a rule (lottery,
sum-to-threshold, secretary candidates, derangement) and reports the converged
mean and standard deviation per generator.

Example:
    import noiselab

    result = noiselab.run_experiment(
        "golden_ratio",
        "sum",
        noiselab.RunSeed.fixed(42),
        outer_trials=100,
        inner_trials=100,
    )
    print(result.mean, result.std_dev)  # close to e for white noise

    # Or run the configured suite (.noiselab.toml) on a process pool:
    config = noiselab.ProjectConfig.load()
    executor = config.executor.create()  # None means serial
    results = noiselab.run_suite(config, executor=executor)
    if executor is not None:
        executor.shutdown()
    print(results.table())
"""

__version__ = "0.1.0"

# Config
from noiselab.config import ProjectConfig

# Events
from noiselab.events import Event, EventCallback, EventKind

# Executors
from noiselab.executor import ProcessExecutor, ThreadExecutor, executor_from_config

# Harness
from noiselab.harness import ExperimentResult, run_experiment

# Results
from noiselab.result import SuiteResults

# Rules
from noiselab.rules import SequenceExhaustedError

# Runner
from noiselab.runner import run_suite

# Seeds
from noiselab.seeds import RunSeed, StreamAllocator, StreamIndexer, UniformBitSource

# Sequences
from noiselab.sequences import GeneratorKind, generate, list_generators

# Statistics
from noiselab.stats import RunningStats

# Types
from noiselab.types import ConfigurationError, ExperimentConfig, RuleKind

__all__ = [
    "__version__",
    # Config
    "ProjectConfig",
    # Events
    "Event",
    "EventCallback",
    "EventKind",
    # Executors
    "ProcessExecutor",
    "ThreadExecutor",
    "executor_from_config",
    # Harness
    "ExperimentResult",
    "run_experiment",
    # Results
    "SuiteResults",
    # Rules
    "SequenceExhaustedError",
    # Runner
    "run_suite",
    # Seeds
    "RunSeed",
    "StreamAllocator",
    "StreamIndexer",
    "UniformBitSource",
    # Sequences
    "GeneratorKind",
    "generate",
    "list_generators",
    # Statistics
    "RunningStats",
    # Types
    "ConfigurationError",
    "ExperimentConfig",
    "RuleKind",
]
