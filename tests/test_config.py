"""Tests for noiselab.config module."""

from __future__ import annotations

import pytest

from noiselab.config import (
    CONFIG_FILENAME,
    LOCAL_CONFIG_FILENAME,
    ProjectConfig,
    deep_merge,
    find_config_file,
)
from noiselab.sequences import GeneratorKind
from noiselab.types import ConfigurationError, RuleKind

SAMPLE_TOML = """
[run]
deterministic = true
seed = 42

[executor]
type = "thread"
workers = 2

[progress]
style = "simple"

[experiments.quick_sum]
rule = "sum"
outer_trials = 4
inner_trials = 5
generators = ["white", "golden_ratio"]

[experiments.lottery]
outer_trials = 2
inner_trials = 3
size = 50
"""


# ---------------------------------------------------------------------------
# deep_merge
# ---------------------------------------------------------------------------


class TestDeepMerge:
    def test_basic(self):
        base = {"a": 1, "b": {"c": 2, "d": 3}}
        override = {"b": {"c": 99, "e": 5}}
        result = deep_merge(base, override)
        assert result == {"a": 1, "b": {"c": 99, "d": 3, "e": 5}}

    def test_does_not_mutate_base(self):
        base = {"a": 1, "b": {"c": 2, "d": 3}}
        deep_merge(base, {"b": {"c": 99}})
        assert base["b"]["c"] == 2

    def test_override_dict_with_scalar(self):
        assert deep_merge({"a": {"b": 1}}, {"a": 5}) == {"a": 5}

    def test_empty_sides(self):
        assert deep_merge({}, {"a": 1}) == {"a": 1}
        assert deep_merge({"a": 1}, {}) == {"a": 1}


# ---------------------------------------------------------------------------
# find_config_file
# ---------------------------------------------------------------------------


class TestFindConfigFile:
    def test_found_in_parent(self, tmp_path):
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        subdir = tmp_path / "a" / "b" / "c"
        subdir.mkdir(parents=True)
        assert find_config_file(subdir) == config_file.resolve()

    def test_found_in_start_dir(self, tmp_path):
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        assert find_config_file(tmp_path) == config_file.resolve()


# ---------------------------------------------------------------------------
# ProjectConfig.from_dict
# ---------------------------------------------------------------------------


class TestFromDict:
    def test_empty_dict_uses_defaults(self):
        config = ProjectConfig.from_dict({})
        assert config.run.deterministic is False
        assert config.executor.type == "process"
        assert config.progress.style == "rich"
        assert set(config.experiments) == {"lottery", "sum", "candidates", "derangement"}
        assert config.experiments["lottery"].size == 10_000

    def test_experiments_replace_defaults(self):
        config = ProjectConfig.from_dict(
            {"experiments": {"sum": {"outer_trials": 2, "inner_trials": 2}}}
        )
        assert config.list_experiments() == ["sum"]
        assert config.experiments["sum"].outer_trials == 2

    def test_executor_options(self):
        config = ProjectConfig.from_dict({"executor": {"type": "thread", "workers": 3}})
        assert config.executor.type == "thread"
        assert config.executor.options == {"workers": 3}

    def test_invalid_progress_style(self):
        with pytest.raises(ConfigurationError, match="progress.style"):
            ProjectConfig.from_dict({"progress": {"style": "fancy"}})

    def test_invalid_seed(self):
        with pytest.raises(ConfigurationError, match="run.seed"):
            ProjectConfig.from_dict({"run": {"seed": -1}})

    def test_invalid_deterministic(self):
        with pytest.raises(ConfigurationError, match="run.deterministic"):
            ProjectConfig.from_dict({"run": {"deterministic": "yes"}})

    def test_no_experiments(self):
        with pytest.raises(ConfigurationError, match="No experiments"):
            ProjectConfig.from_dict({"experiments": {}})

    def test_degenerate_experiment_rejected(self):
        with pytest.raises(ConfigurationError):
            ProjectConfig.from_dict({"experiments": {"candidates": {"size": 2}}})

    def test_local_overrides(self):
        config = ProjectConfig.from_dict(
            {"run": {"seed": 1}},
            local_overrides={"run": {"seed": 9}, "experiments": {"sum": {"inner_trials": 7}}},
        )
        assert config.run.seed == 9
        assert config.experiments["sum"].inner_trials == 7
        assert config.experiments["sum"].outer_trials == 1000

    def test_run_seed_deterministic(self):
        config = ProjectConfig.from_dict({"run": {"deterministic": True, "seed": 5}})
        run_seed = config.run.run_seed()
        assert run_seed.value == 5
        assert run_seed.deterministic


# ---------------------------------------------------------------------------
# ProjectConfig.load
# ---------------------------------------------------------------------------


class TestLoad:
    def test_load_explicit_path(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text(SAMPLE_TOML)
        config = ProjectConfig.load(path=path)
        assert config.source == path
        assert config.run.seed == 42
        assert config.executor.options == {"workers": 2}
        assert config.experiments["quick_sum"].rule is RuleKind.SUM_TO_THRESHOLD
        assert config.experiments["lottery"].rule is RuleKind.LOTTERY

    def test_load_found_by_walking_up(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text(SAMPLE_TOML)
        subdir = tmp_path / "nested"
        subdir.mkdir()
        config = ProjectConfig.load(start_dir=subdir)
        assert config.progress.style == "simple"

    def test_local_file_merged(self, tmp_path):
        (tmp_path / CONFIG_FILENAME).write_text(SAMPLE_TOML)
        (tmp_path / LOCAL_CONFIG_FILENAME).write_text("[executor]\nworkers = 6\n")
        config = ProjectConfig.load(start_dir=tmp_path)
        assert config.executor.type == "thread"
        assert config.executor.options == {"workers": 6}

    def test_missing_explicit_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ProjectConfig.load(path=tmp_path / "missing.toml")


# ---------------------------------------------------------------------------
# ProjectConfig.select
# ---------------------------------------------------------------------------


class TestSelect:
    def test_select_experiments(self):
        config = ProjectConfig.from_dict({}).select(experiments=["sum"])
        assert config.list_experiments() == ["sum"]

    def test_select_unknown_experiment(self):
        with pytest.raises(ConfigurationError, match="Unknown experiment"):
            ProjectConfig.from_dict({}).select(experiments=["nope"])

    def test_select_generators(self):
        config = ProjectConfig.from_dict({}).select(generators=["white", "red_block"])
        for experiment in config.experiments.values():
            assert experiment.generators == (GeneratorKind.WHITE, GeneratorKind.RED_BLOCK)

    def test_select_unknown_generator(self):
        with pytest.raises(ConfigurationError):
            ProjectConfig.from_dict({}).select(generators=["pink"])

    def test_select_does_not_mutate(self):
        config = ProjectConfig.from_dict({})
        config.select(experiments=["sum"])
        assert len(config.experiments) == 4
