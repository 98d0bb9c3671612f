"""Tests for loading .claude/iterative-workflow.toml."""

from pathlib import Path

import pytest

from iterative_workflow.config import (
    ConfigError,
    WorkflowConfig,
    get_config_path,
    load_workflow_config,
)


def _write_config(project: Path, content: str) -> None:
    path = get_config_path(project)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_missing_file_uses_defaults(tmp_project: Path) -> None:
    config = load_workflow_config(tmp_project)

    assert config == WorkflowConfig()
    assert config.thresholds.security_min == 85
    assert config.observability.log_output == "console"
    assert config.checkpoint_keep == 5


def test_loads_all_sections(tmp_project: Path) -> None:
    _write_config(
        tmp_project,
        """\
[quality.thresholds]
security_min = 90
max_high_issues = 0

[quality.weights]
security = 0.5
quality = 0.3
performance = 0.2

[observability]
log_level = "debug"
log_output = "json"
persist_traces = true
trace_dir = "traces"
max_trace_files = 10

[checkpoints]
keep = 3
""",
    )

    config = load_workflow_config(tmp_project)

    assert config.thresholds.security_min == 90
    assert config.thresholds.max_high_issues == 0
    assert config.thresholds.quality_min == 80
    assert config.weights.security == 0.5
    assert config.observability.log_level == "DEBUG"
    assert config.observability.log_output == "json"
    assert config.observability.persist_traces
    assert config.observability.trace_dir == "traces"
    assert config.observability.max_trace_files == 10
    assert config.checkpoint_keep == 3


def test_invalid_toml(tmp_project: Path) -> None:
    _write_config(tmp_project, "[quality\nsecurity_min = ")

    with pytest.raises(ConfigError, match="Invalid config"):
        load_workflow_config(tmp_project)


def test_non_utf8_file(tmp_project: Path) -> None:
    path = get_config_path(tmp_project)
    path.parent.mkdir(parents=True)
    path.write_bytes(b"\xff\xfe[quality]\n")

    with pytest.raises(ConfigError, match="not valid UTF-8"):
        load_workflow_config(tmp_project)


def test_quoted_threshold_is_rejected(tmp_project: Path) -> None:
    _write_config(tmp_project, '[quality.thresholds]\nsecurity_min = "90"\n')

    with pytest.raises(ConfigError, match="security_min"):
        load_workflow_config(tmp_project)


def test_weights_must_sum_to_one(tmp_project: Path) -> None:
    _write_config(tmp_project, "[quality.weights]\nsecurity = 0.9\n")

    with pytest.raises(ConfigError, match="Weights must sum to 1.0"):
        load_workflow_config(tmp_project)


def test_threshold_out_of_range(tmp_project: Path) -> None:
    _write_config(tmp_project, "[quality.thresholds]\nsecurity_min = 150\n")

    with pytest.raises(ConfigError, match="security_min"):
        load_workflow_config(tmp_project)


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ('[observability]\nlog_level = "TRACE"\n', "log_level"),
        ('[observability]\nlog_output = "file"\n', "log_output"),
        ('[observability]\npersist_traces = "yes"\n', "persist_traces"),
        ("[observability]\nmax_trace_files = 0\n", "max_trace_files"),
        ("[checkpoints]\nkeep = -1\n", "keep"),
        ('quality = "high"\n', r"\[quality\] must be a table"),
    ],
)
def test_invalid_values(tmp_project: Path, content: str, message: str) -> None:
    _write_config(tmp_project, content)

    with pytest.raises(ConfigError, match=message):
        load_workflow_config(tmp_project)
