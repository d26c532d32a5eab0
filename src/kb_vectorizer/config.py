"""
Configuration for the TF-IDF engine.

`min_df` and `max_df` are read as fractions of the fitted corpus when below
1.0 and as absolute document counts otherwise. `max_df == 1.0` disables the
upper filter and `max_features == 0` disables the feature cap.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping


NORMALIZATIONS = ("l1", "l2", "none")

_TRUE_STRINGS = ("true", "1")


@dataclass(frozen=True)
class TfidfConfig:
    """
    Construction-time parameters of a TF-IDF vectorizer.

    Attributes:
        min_df: Minimum document frequency (fraction or count)
        max_df: Maximum document frequency (fraction or count)
        max_features: Keep at most this many highest-df terms (0 = unlimited)
        normalization: Row norm, one of "l1", "l2", "none"
        use_binary: Count term presence instead of raw frequency
        smooth: Laplace constant added to N and df in the IDF formula
    """

    min_df: float = 0.0
    max_df: float = 1.0
    max_features: int = 0
    normalization: str = "l2"
    use_binary: bool = False
    smooth: float = 1.0

    def __post_init__(self):
        if self.normalization not in NORMALIZATIONS:
            raise ValueError(
                f"normalization must be one of {NORMALIZATIONS}, got {self.normalization!r}"
            )
        for name in ("min_df", "max_df", "smooth"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        if self.min_df < 0:
            raise ValueError(f"min_df must be >= 0, got {self.min_df}")
        if self.max_df <= 0:
            raise ValueError(f"max_df must be > 0, got {self.max_df}")
        if self.max_features < 0:
            raise ValueError(f"max_features must be >= 0, got {self.max_features}")
        if self.smooth < 0:
            raise ValueError(f"smooth must be >= 0, got {self.smooth}")

        # Only comparable when both bounds use the same unit.
        if self.max_df != 1.0 and (self.min_df < 1.0) == (self.max_df < 1.0):
            if self.min_df > self.max_df:
                raise ValueError(
                    f"min_df ({self.min_df}) must not exceed max_df ({self.max_df})"
                )

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> "TfidfConfig":
        """Create a config from a dictionary, ignoring unknown keys."""
        return cls(**{k: v for k, v in config_dict.items() if k in cls.__annotations__})

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "TfidfConfig":
        """
        Parse the loosely typed parameter map accepted by the factory.

        Recognized keys: min_df, max_df, max_features, normalization,
        binary ("true"/"1" mean true) and smooth. Values may be strings or
        native Python values; other keys are ignored.

        Raises:
            ValueError: If a value cannot be parsed or fails validation
        """
        kwargs: Dict[str, Any] = {}
        try:
            if "min_df" in params:
                kwargs["min_df"] = float(params["min_df"])
            if "max_df" in params:
                kwargs["max_df"] = float(params["max_df"])
            if "max_features" in params:
                kwargs["max_features"] = int(params["max_features"])
            if "normalization" in params:
                kwargs["normalization"] = str(params["normalization"])
            if "binary" in params:
                kwargs["use_binary"] = _parse_bool(params["binary"])
            if "smooth" in params:
                kwargs["smooth"] = float(params["smooth"])
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid vectorizer parameter: {e}") from e

        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value) in _TRUE_STRINGS
