import math

import numpy as np
import pytest

from binimpurity.errors import UnrecognizedImpurityError, UnsupportedOperationError
from binimpurity.metrics import Entropy, Gini, Variance, impurity_from_string, log2


@pytest.mark.parametrize("metric", [Entropy(), Gini()])
def test_classification_zero_total_is_zero(metric) -> None:
    assert metric.calculate([0.0, 0.0, 0.0], 0.0) == 0.0
    assert metric.calculate_slice(np.zeros(3), 0, 3) == 0.0


def test_variance_zero_count_is_zero() -> None:
    assert Variance().calculate_moments(0.0, 5.0, 25.0) == 0.0
    assert Variance().calculate_slice(np.zeros(3), 0, 3) == 0.0


def test_entropy_single_label_is_zero() -> None:
    assert Entropy().calculate([5.0, 0.0, 0.0], 5.0) == pytest.approx(0.0)


def test_entropy_uniform_is_log2_k() -> None:
    assert Entropy().calculate([2.0, 2.0, 2.0, 2.0], 8.0) == pytest.approx(2.0)
    assert Entropy().calculate([1.0, 1.0, 1.0], 3.0) == pytest.approx(math.log2(3))


def test_entropy_skips_zero_weight_labels() -> None:
    value = Entropy().calculate([3.0, 0.0, 1.0], 4.0)
    expected = -(0.75 * math.log2(0.75) + 0.25 * math.log2(0.25))
    assert value == pytest.approx(expected)
    assert not math.isnan(value)


def test_gini_values() -> None:
    assert Gini().calculate([5.0, 0.0], 5.0) == pytest.approx(0.0)
    assert Gini().calculate([2.0, 2.0, 2.0, 2.0], 8.0) == pytest.approx(0.75)
    assert Gini().calculate([3.0, 1.0], 4.0) == pytest.approx(1.0 - 0.75**2 - 0.25**2)


def test_variance_matches_numpy() -> None:
    values = np.array([1.0, 2.0, 3.0, 10.0])
    count, total, squares = values.size, values.sum(), np.square(values).sum()
    assert Variance().calculate_moments(count, total, squares) == pytest.approx(np.var(values))


@pytest.mark.parametrize("metric", [Entropy(), Gini()])
def test_buffer_form_agrees_with_counts_form(metric) -> None:
    buffer = np.array([3.0, 1.0, 0.0])
    assert metric.calculate_slice(buffer, 0, 3) == pytest.approx(metric.calculate([3.0, 1.0, 0.0], 4.0))


@pytest.mark.parametrize("metric", [Entropy(), Gini()])
def test_buffer_form_respects_offset(metric) -> None:
    buffer = np.array([9.0, 9.0, 3.0, 1.0, 0.0, 9.0])
    assert metric.calculate_slice(buffer, 2, 3) == pytest.approx(metric.calculate([3.0, 1.0, 0.0], 4.0))


def test_variance_buffer_form_agrees_with_moments() -> None:
    buffer = np.array([0.0, 4.0, 16.0, 70.0])
    assert Variance().calculate_slice(buffer, 1, 3) == pytest.approx(
        Variance().calculate_moments(4.0, 16.0, 70.0)
    )


@pytest.mark.parametrize("metric", [Entropy(), Gini()])
def test_classification_rejects_moments(metric) -> None:
    with pytest.raises(UnsupportedOperationError):
        metric.calculate_moments(3.0, 2.0, 1.0)


def test_variance_rejects_counts() -> None:
    with pytest.raises(UnsupportedOperationError):
        Variance().calculate([1.0, 2.0], 3.0)


def test_unsupported_is_not_implemented_error() -> None:
    with pytest.raises(NotImplementedError):
        Entropy().calculate_moments(1.0, 1.0, 1.0)


def test_impurity_from_string() -> None:
    assert impurity_from_string("gini") == Gini()
    assert impurity_from_string("Entropy") == Entropy()
    assert isinstance(impurity_from_string("VARIANCE"), Variance)
    with pytest.raises(UnrecognizedImpurityError, match="mse"):
        impurity_from_string("mse")


def test_log2() -> None:
    assert log2(8.0) == pytest.approx(3.0)
    np.testing.assert_allclose(log2(np.array([1.0, 2.0, 4.0])), [0.0, 1.0, 2.0])


@pytest.mark.parametrize("metric", [Entropy(), Gini()])
def test_rounding_residue_below_zero_is_finite(metric) -> None:
    value = metric.calculate([4.0, -1e-17, 2.0], 6.0)
    assert math.isfinite(value)
    assert value == pytest.approx(metric.calculate([4.0, 0.0, 2.0], 6.0))
