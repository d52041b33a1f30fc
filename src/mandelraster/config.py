"""Configuration objects and YAML loading for Mandelbrot renders."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from itertools import product
from pathlib import Path
from typing import Dict, List, Tuple

import yaml

from .computation import DEFAULT_LIMIT
from .parsing import parse_bounds, parse_complex


@dataclass(frozen=True)
class RenderConfig:
    """Runtime configuration for a single Mandelbrot render."""

    output: str
    width: int
    height: int
    upper_left: complex = complex(-1.20, 0.35)
    lower_right: complex = complex(-1.0, 0.20)
    limit: int = DEFAULT_LIMIT
    chunk_size: int = 16  # rows per timed chunk

    @property
    def bounds(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def image_size(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def total_chunks(self) -> int:
        return (self.height + self.chunk_size - 1) // self.chunk_size

    @property
    def run_name(self) -> str:
        """Generate unique run name embedding all parameters."""
        return (
            f"{self.image_size}_l{self.limit}_c{self.chunk_size}_"
            f"{_format_point(self.upper_left)}_{_format_point(self.lower_right)}"
        )

    def to_dict(self) -> dict:
        """Convert to a flat dictionary for MLflow logging."""
        data = asdict(self)
        for key in ("upper_left", "lower_right"):
            data[key] = _format_point(data[key])
        return data

    def to_cli_args(self) -> List[str]:
        """Convert config to CLI arguments."""
        return [
            self.output,
            self.image_size,
            _format_point(self.upper_left),
            _format_point(self.lower_right),
            f"--limit={self.limit}",
            f"--chunk-size={self.chunk_size}",
        ]


DEFAULT_RENDER_CONFIG = RenderConfig(
    output="mandel.png",
    width=1000,
    height=750,
    upper_left=complex(-1.20, 0.35),
    lower_right=complex(-1.0, 0.20),
    limit=DEFAULT_LIMIT,
    chunk_size=16,
)


def default_render_config(**overrides: object) -> RenderConfig:
    """Return the canonical default config optionally overridden with kwargs."""
    return _build_render_config({**asdict(DEFAULT_RENDER_CONFIG), **overrides})


def load_render_configs(yaml_path: str | Path) -> List[RenderConfig]:
    """Load YAML config and flatten every named render into one list."""
    configs: List[RenderConfig] = []
    for _, group in load_named_render_configs(yaml_path):
        configs.extend(group)
    return configs


def get_config_by_index(yaml_path: str | Path, index: int) -> RenderConfig:
    """Get a specific config by index from the flattened render list."""
    configs = load_render_configs(yaml_path)
    if index < 0 or index >= len(configs):
        raise ValueError(f"Config index {index} out of range [0, {len(configs) - 1}]")
    return configs[index]


def load_named_render_configs(
    yaml_path: str | Path,
    name: str | None = None,
) -> List[tuple[str, List[RenderConfig]]]:
    """Load renders grouped by name.

    Each entry under ``renders`` may carry a ``sweep`` mapping of lists that is
    expanded as a cartesian product on top of the entry and the file defaults.
    """
    with open(yaml_path) as f:
        cfg = yaml.safe_load(f) or {}

    defaults: Dict[str, object] = cfg.get("defaults", {}) or {}
    renders = cfg.get("renders") or []
    results: List[tuple[str, List[RenderConfig]]] = []

    for idx, entry in enumerate(renders):
        entry = dict(entry)
        label = str(entry.pop("name", None) or f"{Path(yaml_path).stem}_{idx}")
        if name and label != name:
            continue
        sweep = entry.pop("sweep", None) or {}
        results.append((label, _expand_sweep({**defaults, **entry}, sweep)))

    if name and not results:
        raise ValueError(f"Render '{name}' not found in {yaml_path}")
    return results


def _expand_sweep(base: Dict[str, object], sweep: Dict[str, object]) -> List[RenderConfig]:
    """Expand sweep definition into RenderConfig instances."""
    if not sweep:
        return [_build_render_config(base)]

    keys = list(sweep.keys())
    values = [v if isinstance(v, (list, tuple)) else [v] for v in sweep.values()]
    configs = [
        _build_render_config({**base, **dict(zip(keys, combo))})
        for combo in product(*values)
    ]

    if len(configs) > 1:
        configs = [replace(c, output=_suffixed_output(c.output, c.run_name)) for c in configs]
    return configs


def _build_render_config(raw_data: Dict[str, object]) -> RenderConfig:
    data = _coerce_dimensions(dict(raw_data))
    if "output" not in data:
        data["output"] = DEFAULT_RENDER_CONFIG.output
    data["output"] = str(data["output"])
    for key in ("upper_left", "lower_right"):
        if key in data:
            data[key] = _normalize_point(data[key])
    for key in ("limit", "chunk_size"):
        if key in data:
            data[key] = int(data[key])
            if data[key] <= 0:
                raise ValueError(f"{key} must be positive, got {data[key]}")
    try:
        return RenderConfig(**data)  # type: ignore[arg-type]
    except TypeError as exc:
        raise ValueError(f"Invalid render configuration: {exc}") from exc


def _coerce_dimensions(data: Dict[str, object]) -> Dict[str, object]:
    result = dict(data)
    for key in ("image_size", "image_shape"):
        shape = result.pop(key, None)
        if shape is not None:
            width, height = _normalize_shape_entry(shape)
            result["width"] = width
            result["height"] = height
    for key in ("width", "height"):
        if key in result:
            result[key] = int(result[key])
            if result[key] <= 0:
                raise ValueError(f"{key} must be positive, got {result[key]}")
    return result


def _normalize_shape_entry(entry: object) -> Tuple[int, int]:
    if isinstance(entry, dict):
        width = entry.get("width")
        height = entry.get("height")
        if width is None or height is None:
            raise ValueError("image_shape dict must include 'width' and 'height'")
        return int(width), int(height)
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return int(entry[0]), int(entry[1])
    if isinstance(entry, str):
        bounds = parse_bounds(entry)
        if bounds is None:
            raise ValueError(f"Could not parse image size {entry!r}")
        return bounds
    raise ValueError(f"Unsupported image shape specification: {entry!r}")


def _normalize_point(entry: object) -> complex:
    if isinstance(entry, complex):
        return entry
    if isinstance(entry, (int, float)):
        return complex(entry)
    if isinstance(entry, (list, tuple)) and len(entry) == 2:
        return complex(float(entry[0]), float(entry[1]))
    if isinstance(entry, str):
        point = parse_complex(entry)
        if point is None:
            raise ValueError(f"Could not parse complex point {entry!r}")
        return point
    raise ValueError(f"Unsupported complex point specification: {entry!r}")


def _format_point(point: complex) -> str:
    return f"{point.real!r},{point.imag!r}"


def _suffixed_output(output: str, run_name: str) -> str:
    path = Path(output)
    return str(path.with_name(f"{path.stem}_{run_name}{path.suffix}"))
