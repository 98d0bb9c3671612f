"""Project-level workflow settings.

Settings live in the optional `.claude/iterative-workflow.toml` of the target
project. A missing file means defaults; a present but invalid file is a
``ConfigError``.
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, cast

from pydantic import ValidationError

from iterative_workflow.observability.logging import LOG_LEVELS, LOG_OUTPUTS, LogOutput
from iterative_workflow.quality.schemas import QualityThresholds, Weights

CONFIG_FILENAME = "iterative-workflow.toml"
DEFAULT_TRACE_DIR = ".claude/traces"
DEFAULT_MAX_TRACE_FILES = 50
DEFAULT_CHECKPOINT_KEEP = 5


class ConfigError(Exception):
    """Raised when the workflow config file exists but is invalid."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"Invalid config {path}: {message}")


@dataclass(frozen=True)
class ObservabilityConfig:
    log_level: str = "INFO"
    log_output: LogOutput = "console"
    persist_traces: bool = False
    trace_dir: str = DEFAULT_TRACE_DIR
    max_trace_files: int = DEFAULT_MAX_TRACE_FILES


@dataclass(frozen=True)
class WorkflowConfig:
    """In-memory representation of `.claude/iterative-workflow.toml`.

    Example:
      [quality.thresholds]
      security_min = 90

      [quality.weights]
      security = 0.5
      quality = 0.3
      performance = 0.2

      [observability]
      log_level = "DEBUG"
      persist_traces = true

      [checkpoints]
      keep = 10
    """

    thresholds: QualityThresholds = field(default_factory=QualityThresholds)
    weights: Weights = field(default_factory=Weights)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)
    checkpoint_keep: int = DEFAULT_CHECKPOINT_KEEP


def get_config_path(project_dir: Path) -> Path:
    return project_dir / ".claude" / CONFIG_FILENAME


def _table(data: dict[str, Any], key: str, path: Path) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(path, f"[{key}] must be a table")
    return value


def _parse_observability(data: dict[str, Any], path: Path) -> ObservabilityConfig:
    defaults = ObservabilityConfig()

    log_level = str(data.get("log_level", defaults.log_level)).upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(path, f"log_level must be one of {', '.join(LOG_LEVELS)}")

    log_output = data.get("log_output", defaults.log_output)
    if log_output not in LOG_OUTPUTS:
        raise ConfigError(path, f"log_output must be one of {', '.join(LOG_OUTPUTS)}")

    persist_traces = data.get("persist_traces", defaults.persist_traces)
    if not isinstance(persist_traces, bool):
        raise ConfigError(path, "persist_traces must be a boolean")

    max_trace_files = data.get("max_trace_files", defaults.max_trace_files)
    if isinstance(max_trace_files, bool) or not isinstance(max_trace_files, int):
        raise ConfigError(path, "max_trace_files must be an integer")
    if max_trace_files < 1:
        raise ConfigError(path, "max_trace_files must be at least 1")

    return ObservabilityConfig(
        log_level=log_level,
        log_output=cast(LogOutput, log_output),
        persist_traces=persist_traces,
        trace_dir=str(data.get("trace_dir", defaults.trace_dir)),
        max_trace_files=max_trace_files,
    )


def load_workflow_config(project_dir: Path) -> WorkflowConfig:
    """Load the project's workflow config, or defaults if the file is absent.

    Raises:
        ConfigError: If the file is not valid TOML or a value is out of range.
    """
    path = get_config_path(project_dir)
    if not path.exists():
        return WorkflowConfig()

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise ConfigError(path, f"not valid UTF-8: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(path, str(e)) from e

    quality = _table(data, "quality", path)
    try:
        thresholds = QualityThresholds.model_validate(_table(quality, "thresholds", path))
        weights = Weights.model_validate(_table(quality, "weights", path))
    except ValidationError as e:
        raise ConfigError(path, str(e)) from e

    keep = _table(data, "checkpoints", path).get("keep", DEFAULT_CHECKPOINT_KEEP)
    if isinstance(keep, bool) or not isinstance(keep, int) or keep < 0:
        raise ConfigError(path, "[checkpoints] keep must be a non-negative integer")

    return WorkflowConfig(
        thresholds=thresholds,
        weights=weights,
        observability=_parse_observability(_table(data, "observability", path), path),
        checkpoint_keep=keep,
    )
