from __future__ import annotations
from dataclasses import dataclass
from typing import Union
import numpy as np

# Every component is either a float (one pixel) or an ndarray (a whole plane).
Component = Union[float, np.ndarray]


@dataclass(frozen=True)
class HSV:
    h: Component  # [0, 360)
    s: Component  # [0, 100]
    v: Component  # [0, 100]


@dataclass(frozen=True)
class XYZ:
    x: Component  # scaled x100
    y: Component
    z: Component


@dataclass(frozen=True)
class Lab:
    l: Component  # [0, 100]
    a: Component  # green-red axis
    b: Component  # blue-yellow axis
