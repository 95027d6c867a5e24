import numpy as np
import pytest

from tax import deflate, discount_factors, interest_deduction, net_payment, shows_real_values


class TestInterestDeduction:
    def test_flat_rate(self):
        assert interest_deduction(12_000, 0.37) == pytest.approx(4_440)

    def test_vectorised(self):
        result = interest_deduction([1_000, 2_000], 0.5)
        np.testing.assert_allclose(result, [500, 1_000])

    def test_zero_rate(self):
        assert interest_deduction(12_000, 0.0) == 0.0


class TestNetPayment:
    def test_payment_minus_deduction(self):
        assert net_payment(17_187, 12_000, 0.37) == pytest.approx(17_187 - 4_440)

    def test_no_interest_no_deduction(self):
        np.testing.assert_allclose(net_payment([10_000, 10_000], [0, 0], 0.37),
                                   [10_000, 10_000])


class TestDiscountFactors:
    def test_year_one_undiscounted(self):
        factors = discount_factors([1, 2, 3], 0.02)
        np.testing.assert_allclose(factors, [1.0, 1.02, 1.02 ** 2])

    def test_zero_inflation(self):
        np.testing.assert_array_equal(discount_factors(np.arange(1, 31), 0.0), np.ones(30))


class TestDeflate:
    def test_values_shrink_with_inflation(self):
        real = deflate([100.0, 100.0, 100.0], [1, 2, 3], 0.10)
        np.testing.assert_allclose(real, [100.0, 100 / 1.1, 100 / 1.21])

    def test_zero_inflation_is_identity(self):
        values = np.array([17_187.0, 16_900.0])
        np.testing.assert_array_equal(deflate(values, [1, 2], 0.0), values)


class TestShowsRealValues:
    def test_threshold(self):
        assert not shows_real_values(0.0)
        assert shows_real_values(0.001)
