import math

import pytest

from worldcore.vector_utils import (
    clamp,
    vec_add,
    vec_clip,
    vec_div,
    vec_len,
    vec_rotate,
    vec_scale,
    vec_sub,
    vec_unit,
)


def test_basic_arithmetic():
    assert vec_add((1.0, 2.0), (3.0, -1.0)) == (4.0, 1.0)
    assert vec_sub((1.0, 2.0), (3.0, -1.0)) == (-2.0, 3.0)
    assert vec_scale((1.5, -2.0), 2.0) == (3.0, -4.0)
    assert vec_div((3.0, -4.0), 2.0) == (1.5, -2.0)
    assert vec_len((3.0, 4.0)) == 5.0


@pytest.mark.parametrize("v", [(3.0, 4.0), (-0.2, 0.05), (1e6, -1e6), (0.0, 0.0), (1e-9, 0.0)])
@pytest.mark.parametrize("max_len", [0.1, 1.0, 42.0])
def test_clip_never_exceeds_max(v, max_len):
    assert vec_len(vec_clip(v, max_len)) <= max_len + 1e-12


def test_clip_keeps_short_vectors_unchanged():
    v = (0.03, 0.04)
    assert vec_clip(v, 0.1) == v


def test_clip_keeps_direction():
    clipped = vec_clip((30.0, 40.0), 0.5)
    assert clipped == pytest.approx((0.3, 0.4))


def test_rotate_quarter_turn():
    assert vec_rotate((1.0, 0.0), math.pi / 2) == pytest.approx((0.0, 1.0), abs=1e-12)
    assert vec_rotate((0.0, 2.0), math.pi) == pytest.approx((0.0, -2.0), abs=1e-12)


def test_unit_vector_has_length_one():
    assert vec_len(vec_unit((-7.0, 2.5))) == pytest.approx(1.0)


def test_zero_length_vectors_are_not_normalised():
    with pytest.raises(ZeroDivisionError):
        vec_unit((0.0, 0.0))
    with pytest.raises(ZeroDivisionError):
        vec_div((1.0, 1.0), 0)


def test_clamp():
    assert clamp(5, 0, 1) == 1
    assert clamp(-5, 0, 1) == 0
    assert clamp(0.5, 0, 1) == 0.5
