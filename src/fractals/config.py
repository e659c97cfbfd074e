"""Configuration objects and YAML loading for fractal renders."""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from itertools import product
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import yaml

from .geometry import ComplexNumber

MODES = ("mandelbrot", "julia")

# Julia constants offered by the browser front end.
JULIA_PRESETS: Dict[str, Tuple[float, float]] = {
    "0 + 0i": (0.0, 0.0),
    "-0.15 + 0.65i": (-0.15, 0.65),
    "-0.4 + 0.56i": (-0.4, 0.56),
    "0.3555534 - 0.3372992i": (0.3555534, -0.3372992),
    "0.31 + .025i": (0.31, 0.25),
    "0.355 + 0.355i": (0.355, 0.355),
    "-0.4 + 0.6i": (-0.4, 0.6),
    "-0.4 - 0.59i": (-0.4, -0.59),
    "-0.8 + 0.156i": (-0.8, 0.156),
    "0.274 - 0.008i": (0.274, -0.008),
    "-0.123 + 0.745i": (-0.123, 0.745),
    "-0.75 + 0i": (-0.75, 0.0),
    "-0.835 - 0.2321i": (-0.835, -0.2321),
    "-0.624 + 0.435i": (-0.624, 0.435),
    "-0.618 + 0i": (-0.618, 0.0),
}


@dataclass(frozen=True)
class RenderConfig:
    """Parameters for a single fractal render."""

    mode: str  # 'mandelbrot' or 'julia'
    width: int
    height: int
    iterations: int
    zoom: float = 1.0
    offset_x: float = 1.0
    offset_y: float = 1.0
    real: float = -0.4
    imaginary: float = 0.6
    chunk_size: int = 16

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise ValueError(f"Unknown mode {self.mode!r}, expected one of {MODES}")
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Image size must be non-negative, got {self.image_size}")
        if self.iterations < 0:
            raise ValueError(f"Iteration cap must be non-negative, got {self.iterations}")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

    @property
    def total_chunks(self) -> int:
        return (self.width + self.chunk_size - 1) // self.chunk_size

    @property
    def julia_constant(self) -> ComplexNumber:
        return ComplexNumber(self.real, self.imaginary)

    @property
    def run_name(self) -> str:
        """Unique run name embedding the render parameters."""
        name = f"{self.mode}_{self.image_size}_i{self.iterations}_z{self.zoom:g}"
        if self.mode == "julia":
            name += f"_c{self.real:g}{self.imaginary:+g}i"
        return name

    @property
    def image_size(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def buffer_size(self) -> int:
        return self.width * self.height * 4

    def to_dict(self) -> dict:
        """Convert to dictionary for MLflow logging."""
        return asdict(self)

    def to_cli_args(self) -> List[str]:
        """Convert config to CLI arguments."""
        return [
            f"--mode={self.mode}",
            f"--image-size={self.image_size}",
            f"--iterations={self.iterations}",
            f"--zoom={self.zoom}",
            f"--offset-x={self.offset_x}",
            f"--offset-y={self.offset_y}",
            f"--real={self.real}",
            f"--imaginary={self.imaginary}",
            f"--chunk-size={self.chunk_size}",
        ]


DEFAULT_RENDER_CONFIG = RenderConfig(
    mode="julia",
    width=512,
    height=512,
    iterations=100,
    zoom=1.0,
    offset_x=1.0,
    offset_y=1.0,
    real=-0.4,
    imaginary=0.6,
    chunk_size=16,
)


def default_render_config(**overrides: object) -> RenderConfig:
    """Return the canonical default config optionally overridden with kwargs."""
    return replace(DEFAULT_RENDER_CONFIG, **_coerce_fields(overrides))


def load_sweep_configs(yaml_path: str | Path) -> List[RenderConfig]:
    """Load YAML config and generate all parameter sweep combinations.

    Supports a top-level ``sweep`` as well as named suites nested under
    ``experiments``.
    """
    with open(yaml_path) as f:
        cfg = yaml.safe_load(f) or {}

    global_defaults: Dict[str, object] = cfg.get("defaults", {}) or {}

    if "experiments" in cfg:
        configs: List[RenderConfig] = []
        for exp in cfg.get("experiments") or []:
            sweep = exp.get("sweep")
            if not sweep:
                continue
            exp_defaults = _layer(global_defaults, exp.get("defaults", {}) or {})
            configs.extend(_expand_sweep(exp_defaults, sweep))
        return configs

    sweep: Dict[str, object] = cfg.get("sweep", {}) or {}
    return _expand_sweep(global_defaults, sweep)


def load_named_sweep_configs(
    yaml_path: str | Path,
    suite: str | None = None,
) -> List[tuple[str, List[RenderConfig]]]:
    with open(yaml_path) as f:
        cfg = yaml.safe_load(f) or {}

    defaults: Dict[str, object] = cfg.get("defaults", {}) or {}
    experiments = cfg.get("experiments")
    results: List[tuple[str, List[RenderConfig]]] = []

    if experiments:
        for exp in experiments:
            name = exp.get("name")
            if not name:
                continue
            if suite and name != suite:
                continue
            sweep = exp.get("sweep") or {}
            exp_defaults = _layer(defaults, exp.get("defaults", {}) or {})
            results.append((name, _expand_sweep(exp_defaults, sweep)))
        if suite and not results:
            raise ValueError(f"Suite '{suite}' not found in {yaml_path}")
        return results

    sweep: Dict[str, object] = cfg.get("sweep", {}) or {}
    label = cfg.get("name") or Path(yaml_path).stem
    return [(label, _expand_sweep(defaults, sweep))]


def get_config_by_index(yaml_path: str | Path, index: int) -> RenderConfig:
    """Get a specific config by index from sweep."""
    configs = load_sweep_configs(yaml_path)
    if index < 0 or index >= len(configs):
        raise ValueError(f"Config index {index} out of range [0, {len(configs) - 1}]")
    return configs[index]


def parse_image_size(value: str) -> Tuple[int, int]:
    try:
        width_str, height_str = value.lower().split("x")
        return int(width_str.strip()), int(height_str.strip())
    except ValueError:
        raise ValueError(f"Image size must look like WIDTHxHEIGHT, got {value!r}") from None


def resolve_preset(name: str) -> Tuple[float, float]:
    if name not in JULIA_PRESETS:
        raise ValueError(f"Unknown Julia preset {name!r}")
    return JULIA_PRESETS[name]


def _build_render_config(raw_data: Dict[str, object]) -> RenderConfig:
    data = _coerce_fields(raw_data)
    unknown = set(data) - set(asdict(DEFAULT_RENDER_CONFIG))
    if unknown:
        raise ValueError(f"Unknown render config keys: {sorted(unknown)}")
    # Anything not swept falls back to the canonical defaults.
    return default_render_config(**data)


def _layer(base: Dict[str, object], overrides: Dict[str, object]) -> Dict[str, object]:
    """Merge ``overrides`` over ``base``; a preset and an explicit constant replace each other."""
    merged = dict(base)
    if "preset" in overrides:
        merged.pop("real", None)
        merged.pop("imaginary", None)
    if "real" in overrides or "imaginary" in overrides:
        merged.pop("preset", None)
    merged.update(overrides)
    return merged


def _expand_sweep(defaults: Dict[str, object], sweep: Dict[str, object]) -> List[RenderConfig]:
    """Expand sweep definition into RenderConfig instances."""
    configs: List[RenderConfig] = []

    param_grid = {k: sweep[k] for k in sweep if k != "image_shape"}
    shape_options = sweep.get("image_shape")

    keys = list(param_grid.keys())
    if not keys:
        return _expand_shapes(defaults, shape_options)

    values = [param_grid[k] for k in keys]
    for combo in product(*values):
        data = _layer(defaults, dict(zip(keys, combo)))
        configs.extend(_expand_shapes(data, shape_options))
    return configs


def _coerce_fields(data: Dict[str, object]) -> Dict[str, object]:
    result = dict(data)
    for key in ("image_size", "image_shape"):
        shape = result.pop(key, None)
        if shape is not None:
            width, height = _normalize_shape_entry(shape)
            result.setdefault("width", width)
            result.setdefault("height", height)
    preset = result.pop("preset", None)
    if preset is not None:
        if "real" in result or "imaginary" in result:
            raise ValueError("Give either a Julia preset or real/imaginary, not both")
        result["real"], result["imaginary"] = resolve_preset(str(preset))
    for key in ("width", "height", "iterations", "chunk_size"):
        if key in result:
            result[key] = int(result[key])
    for key in ("zoom", "offset_x", "offset_y", "real", "imaginary"):
        if key in result:
            result[key] = float(result[key])
    if "mode" in result:
        result["mode"] = str(result["mode"]).lower()
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
        return parse_image_size(entry)
    raise ValueError(f"Unsupported image shape specification: {entry!r}")


def _expand_shapes(base: Dict[str, object], shape_options: object) -> List[RenderConfig]:
    if not shape_options:
        return [_build_render_config(base)]

    shapes: Iterable[Tuple[int, int]]
    if isinstance(shape_options, (list, tuple)):
        shapes = [_normalize_shape_entry(opt) for opt in shape_options]
    else:
        shapes = [_normalize_shape_entry(shape_options)]

    return [_build_render_config({**base, "width": w, "height": h}) for w, h in shapes]
