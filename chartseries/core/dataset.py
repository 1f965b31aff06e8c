# chartseries/core/dataset.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import numpy as np

from .calendar import TIMESTAMP_DTYPE, as_timestamps
from .exceptions import InvalidChannelSelection, InvalidTemporalDataSet, MissingChannel
from .units import TimeUnit


def _frozen(arr: np.ndarray) -> np.ndarray:
    out = np.array(arr, copy=True)
    out.flags.writeable = False
    return out


def _as_values(values: Any, label: str) -> np.ndarray:
    try:
        v = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidTemporalDataSet(f"{label} must be numeric: {e}") from e
    if v.ndim != 1:
        raise InvalidTemporalDataSet(f"{label} must be 1D, got shape {v.shape}")
    return v


@dataclass(frozen=True, slots=True, eq=False)
class TemporalDataSet:
    """
    Immutable time series: 1D timestamps plus one value channel or several named ones.

    Exactly one of ``values`` (single channel) or ``channels`` (name -> values)
    is set. All arrays are stored read-only; transforms return new instances.
    """

    timestamps: np.ndarray = field(repr=False)
    values: np.ndarray | None = field(default=None, repr=False)
    channels: Mapping[str, np.ndarray] | None = field(default=None, repr=False)
    unit: TimeUnit = TimeUnit.MINUTE
    name: str | None = None

    def __post_init__(self) -> None:
        if (self.values is None) == (self.channels is None):
            raise InvalidChannelSelection("Exactly one of `values` or `channels` must be provided.")

        if not isinstance(self.unit, TimeUnit):
            raise InvalidTemporalDataSet(f"`unit` must be a TimeUnit, got {self.unit!r}")

        try:
            t = as_timestamps(self.timestamps)
        except (TypeError, ValueError) as e:
            raise InvalidTemporalDataSet(f"`timestamps` must be datetime-like: {e}") from e
        if t.ndim != 1:
            raise InvalidTemporalDataSet(f"`timestamps` must be 1D, got shape {t.shape}")
        if np.isnat(t).any():
            raise InvalidTemporalDataSet("`timestamps` contains NaT.")

        if self.values is not None:
            v = _as_values(self.values, "`values`")
            if v.size != t.size:
                raise InvalidChannelSelection(
                    f"`timestamps` and `values` must have same length, got {t.size} vs {v.size}"
                )
            object.__setattr__(self, "values", _frozen(v))
        else:
            if not isinstance(self.channels, Mapping):
                raise InvalidChannelSelection("`channels` must be a mapping (e.g., dict).")
            if not self.channels:
                raise InvalidChannelSelection("`channels` cannot be empty.")

            normalized: dict[str, np.ndarray] = {}
            for key, values in self.channels.items():
                if not isinstance(key, str) or not key.strip():
                    raise InvalidChannelSelection("`channels` keys must be non-empty strings.")
                v = _as_values(values, f"channel '{key}'")
                if v.size != t.size:
                    raise InvalidChannelSelection(
                        f"`timestamps` and channel '{key}' must have same length, "
                        f"got {t.size} vs {v.size}"
                    )
                normalized[key] = _frozen(v)
            object.__setattr__(self, "channels", normalized)

        object.__setattr__(self, "timestamps", _frozen(t))

    # ---- constructors ----
    @classmethod
    def single(
        cls,
        timestamps: Iterable[Any],
        values: Iterable[float],
        unit: TimeUnit = TimeUnit.MINUTE,
        name: str | None = None,
    ) -> "TemporalDataSet":
        return cls(timestamps=timestamps, values=list(values), unit=unit, name=name)

    @classmethod
    def multi(
        cls,
        timestamps: Iterable[Any],
        channels: Mapping[str, Iterable[float]],
        unit: TimeUnit = TimeUnit.MINUTE,
    ) -> "TemporalDataSet":
        return cls(
            timestamps=timestamps,
            channels={k: list(v) for k, v in channels.items()},
            unit=unit,
        )

    @classmethod
    def empty(cls, unit: TimeUnit = TimeUnit.MINUTE, name: str | None = None) -> "TemporalDataSet":
        return cls(
            timestamps=np.array([], dtype=TIMESTAMP_DTYPE),
            values=np.array([], dtype=np.float64),
            unit=unit,
            name=name,
        )

    # ---- shape ----
    @property
    def is_single_channel(self) -> bool:
        return self.values is not None

    @property
    def is_multi_channel(self) -> bool:
        return self.channels is not None

    @property
    def channel_names(self) -> tuple[str, ...]:
        return tuple(self.channels) if self.channels is not None else ()

    @property
    def n(self) -> int:
        return int(self.timestamps.size)

    def __len__(self) -> int:
        return self.n

    @property
    def t_start(self) -> np.datetime64 | None:
        return None if self.n == 0 else self.timestamps.min()

    @property
    def t_end(self) -> np.datetime64 | None:
        return None if self.n == 0 else self.timestamps.max()

    def get_values(self, name: str) -> np.ndarray:
        if self.channels is None:
            raise InvalidChannelSelection(
                "get_values() needs a multi-channel TemporalDataSet; use `.values`."
            )
        try:
            return self.channels[name]
        except KeyError as e:
            available = ", ".join(self.channels)
            raise MissingChannel(f"Channel '{name}' not found. Available: {available}") from e

    def columns(self) -> dict[str, np.ndarray]:
        """Channel name -> values, with a single channel keyed by ``name`` (or "value")."""
        if self.channels is not None:
            return dict(self.channels)
        return {self.name or "value": self.values}

    # ---- transformations ----
    def rename(self, name: str | None) -> "TemporalDataSet":
        return TemporalDataSet(
            timestamps=self.timestamps,
            values=self.values,
            channels=self.channels,
            unit=self.unit,
            name=name,
        )

    def _replace(
        self,
        *,
        timestamps: np.ndarray,
        values: np.ndarray | None = None,
        channels: Mapping[str, np.ndarray] | None = None,
        unit: TimeUnit | None = None,
    ) -> "TemporalDataSet":
        """Build a sibling with the same shape; used by the transforms."""
        if values is None and channels is None:
            values, channels = self.values, self.channels
        return TemporalDataSet(
            timestamps=timestamps,
            values=values,
            channels=channels,
            unit=self.unit if unit is None else unit,
            name=self.name,
        )

    # ---- equality ----
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TemporalDataSet):
            return NotImplemented
        if self.unit is not other.unit or self.name != other.name:
            return False
        if not np.array_equal(self.timestamps, other.timestamps):
            return False
        if self.values is not None:
            return other.values is not None and np.array_equal(self.values, other.values)
        if other.channels is None or list(self.channels) != list(other.channels):
            return False
        return all(np.array_equal(v, other.channels[k]) for k, v in self.channels.items())

    __hash__ = None  # type: ignore[assignment]

    def to_numpy(self, *, copy: bool = False) -> tuple[np.ndarray, dict[str, np.ndarray]]:
        cols = self.columns()
        if copy:
            return self.timestamps.copy(), {k: v.copy() for k, v in cols.items()}
        return self.timestamps, cols
