import numpy as np
import pytest

from matrix44 import Matrix44
from vectors import vec3


def test_default_is_identity():
    assert np.array_equal(Matrix44().m, np.eye(4))


def test_multiply_is_not_commutative():
    a = Matrix44.rotate_z(np.pi / 2)
    b = Matrix44.translate(1.0, 0.0, 0.0)
    assert not np.allclose((a * b).m, (b * a).m)


def test_left_operand_is_applied_first():
    # Rotate (1,0,0) to (0,1,0), then move it by +1 on x
    m = Matrix44.rotate_z(np.pi / 2) * Matrix44.translate(1.0, 0.0, 0.0)
    assert np.allclose(m.transform_point(vec3(1.0, 0.0, 0.0)), [1.0, 1.0, 0.0])


def test_transform_point_applies_translation():
    m = Matrix44.translate(1.0, 2.0, 3.0)
    assert np.allclose(m.transform_point(vec3(1.0, 1.0, 1.0)), [2.0, 3.0, 4.0])


def test_transform_point_divides_by_w():
    m = Matrix44()
    m.m[3, 3] = 2.0
    assert np.allclose(m.transform_point(vec3(2.0, 4.0, 6.0)), [1.0, 2.0, 3.0])


def test_transform_point_skips_divide_when_w_is_zero():
    m = Matrix44()
    m.m[3, 3] = 0.0
    assert np.allclose(m.transform_point(vec3(2.0, 4.0, 6.0)), [2.0, 4.0, 6.0])


def test_transform_direction_ignores_translation():
    m = Matrix44.rotate_y(np.pi / 2) * Matrix44.translate(10.0, 10.0, 10.0)
    d = m.transform_direction(vec3(0.0, 0.0, -1.0))
    assert np.allclose(d, [-1.0, 0.0, 0.0])


def test_transpose():
    values = np.arange(16, dtype=np.float64).reshape(4, 4)
    assert np.array_equal(Matrix44(values).transpose().m, values.T)


@pytest.mark.parametrize("seed", range(5))
def test_inverse_of_well_conditioned_matrix(seed):
    rng = np.random.default_rng(seed)
    values = rng.uniform(-1.0, 1.0, (4, 4)) + 4 * np.eye(4)
    m = Matrix44(values)
    assert np.allclose((m * m.inverse()).m, np.eye(4), atol=1e-4)


def test_inverse_needs_row_swaps():
    # Zero on the diagonal forces partial pivoting
    values = np.array([
        [0.0, 1.0, 0.0, 0.0],
        [1.0, 0.0, 0.0, 0.0],
        [0.0, 0.0, 2.0, 0.0],
        [3.0, 4.0, 5.0, 1.0],
    ])
    m = Matrix44(values)
    assert np.allclose(m.inverse().m, np.linalg.inv(values))


def test_inverse_of_look_at():
    m = Matrix44.look_at(vec3(1.0, 2.0, 3.0), vec3(0.0, 0.0, 0.0))
    assert np.allclose((m.inverse() * m).m, np.eye(4), atol=1e-9)


def test_singular_inverse_falls_back_to_identity(caplog):
    singular = Matrix44(np.zeros((4, 4)))
    with caplog.at_level("WARNING"):
        inv = singular.inverse()
    assert np.array_equal(inv.m, np.eye(4))
    assert "singular" in caplog.text


def test_try_inverse_reports_singular_matrix():
    values = np.eye(4)
    values[2] = values[1]
    assert Matrix44(values).try_inverse() is None


def test_look_at_basis():
    m = Matrix44.look_at(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, 0.0))
    assert np.allclose(m[0, :3], [1.0, 0.0, 0.0])
    assert np.allclose(m[1, :3], [0.0, 1.0, 0.0])
    assert np.allclose(m[2, :3], [0.0, 0.0, 1.0])
    assert np.allclose(m[3, :3], [0.0, 0.0, 5.0])
    # Local -z points at the target
    assert np.allclose(m.transform_direction(vec3(0.0, 0.0, -1.0)), [0.0, 0.0, -1.0])


def test_zero_diagonal_after_elimination_is_singular():
    # Forward pivots are all nonzero; the last diagonal entry is zero
    singular = Matrix44(np.diag([1.0, 2.0, 3.0, 0.0]))
    assert singular.try_inverse() is None
    assert np.array_equal(singular.inverse().m, np.eye(4))
