"""Shared fixtures: a dyadic frame, a Julia set and a two-thread executor."""

from __future__ import annotations

from typing import Iterator

import pytest

from fractals.julia import QuadraticJuliaSet
from rendering.executor import RenderExecutor
from utils.coords import Frame


@pytest.fixture()
def dyadic_frame() -> Frame:
    # Power-of-two scale and center keep every pixel position exact,
    # so shifted and freshly rendered pixels agree bit for bit.
    return Frame(complex(-0.5, 0.25), 1.0 / 16.0)


@pytest.fixture()
def julia_set() -> QuadraticJuliaSet:
    return QuadraticJuliaSet(complex(-0.75, 0.125))


@pytest.fixture()
def executor() -> Iterator[RenderExecutor]:
    with RenderExecutor(2) as ex:
        yield ex
