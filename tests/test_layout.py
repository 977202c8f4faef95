from __future__ import annotations

import logging

import pytest

from phrase_viewer.config import MIN_SCALE
from phrase_viewer.layout import fit_to_width_scale


def test_fit_to_width_subtracts_margin() -> None:
    assert fit_to_width_scale(600, 640) == pytest.approx(1.0)
    assert fit_to_width_scale(600, 1240) == pytest.approx(2.0)


def test_fit_to_width_custom_margin() -> None:
    assert fit_to_width_scale(500, 1000, margin=0) == pytest.approx(2.0)


@pytest.mark.parametrize("container_width", [0, 20, 40, 41])
def test_degenerate_width_is_clamped(container_width, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="phrase_viewer"):
        scale = fit_to_width_scale(600, container_width)
    assert scale == MIN_SCALE
    assert "clamping" in caplog.text


def test_custom_min_scale() -> None:
    assert fit_to_width_scale(600, 10, min_scale=0.25) == 0.25


def test_zero_page_width_is_rejected() -> None:
    with pytest.raises(ValueError):
        fit_to_width_scale(0, 800)


@pytest.mark.parametrize("container_width", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_width_is_clamped(container_width) -> None:
    assert fit_to_width_scale(600, container_width) == MIN_SCALE
