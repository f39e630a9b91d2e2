"""Configuration models and parameter normalization for heightfields."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
import math
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from lazyterrain.heightfield import HeightField


MIN_SIZE_SHIFT = 3
MAX_SIZE_SHIFT = 29
MIN_SIZE = (1 << MIN_SIZE_SHIFT) + 1
MAX_SIZE = (1 << MAX_SIZE_SHIFT) + 1

DEFAULT_SIZE = 257
DEFAULT_ROUGHNESS = 0.15
DEFAULT_INIT_LEVEL = 1


class InitBy(Enum):
    """Eager pre-fill strategy applied when a field is constructed."""

    DIAMOND_SQUARE = "diamond-square"
    SEED = "seed"
    NONE = "none"

    @classmethod
    def parse(cls, value: "InitBy | str") -> "InitBy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower().replace("_", "-"))
        except ValueError:
            names = ", ".join(member.value for member in cls)
            raise ValueError(f"unknown init strategy {value!r}; expected one of: {names}") from None


def normalize_size(size: int) -> int:
    """Round `size` to the nearest 2^k+1 in [MIN_SIZE, MAX_SIZE], ties upward."""

    size = int(size)
    if size <= MIN_SIZE:
        return MIN_SIZE
    if size >= MAX_SIZE:
        return MAX_SIZE

    lower = MIN_SIZE
    for shift in range(MIN_SIZE_SHIFT + 1, MAX_SIZE_SHIFT + 1):
        upper = (1 << shift) + 1
        if size <= upper:
            return lower if size - lower < upper - size else upper
        lower = upper
    return MAX_SIZE


def normalize_roughness(roughness: float) -> float:
    """Return `|roughness|` clamped to [0, 1]; NaN maps to 0."""

    value = abs(float(roughness))
    if math.isnan(value):
        return 0.0
    return min(value, 1.0)


def max_init_level(size: int) -> int:
    """Deepest diamond-square level a grid of `size` supports."""

    return (size - 1).bit_length() - 1


def clamp_init_level(level: int, size: int) -> int:
    return max(0, min(int(level), max_init_level(size)))


@dataclass(frozen=True)
class HeightFieldConfig:
    """Serializable parameters for building a `HeightField`."""

    size: int = DEFAULT_SIZE
    roughness: float = DEFAULT_ROUGHNESS
    seed: str | int | None = None
    init_level: int = DEFAULT_INIT_LEVEL
    init_by: InitBy = InitBy.DIAMOND_SQUARE

    def build(
        self,
        *,
        roughness_hook: Callable[[int, int, float], float] | None = None,
        post_hook: Callable[[int, int, float], float] | None = None,
        rand_hook: Callable[[int, int, int], int] | None = None,
        use_clock_seed: bool = False,
        seed_source: Callable[[], int] | None = None,
    ) -> "HeightField":
        from lazyterrain.heightfield import HeightField

        return HeightField(
            self.size,
            self.roughness,
            seed=self.seed,
            init_level=self.init_level,
            init_by=self.init_by,
            roughness_hook=roughness_hook,
            post_hook=post_hook,
            rand_hook=rand_hook,
            use_clock_seed=use_clock_seed,
            seed_source=seed_source,
        )

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["init_by"] = InitBy.parse(self.init_by).value
        return payload
