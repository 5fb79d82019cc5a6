# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

import numpy as np
import pytest

from cellarium.norm import apply_to_size_factors, centre_size_factors, set_size_factors
from cellarium.norm.core import centre_size_factor_sets, scale_size_factor_sets, validate_size_factor_sets
from tests.common import make_adata


def test_centre_to_unity():
    centred = centre_size_factor_sets({None: np.array([2.0, 4.0])})
    np.testing.assert_allclose(centred[None], [2 / 3, 4 / 3])
    assert centred[None].mean() == pytest.approx(1.0, abs=1e-15)


def test_centre_is_idempotent():
    once = centre_size_factor_sets({None: np.array([0.3, 1.7, 2.2, 0.9])})
    twice = centre_size_factor_sets(once)
    np.testing.assert_allclose(twice[None], once[None], rtol=1e-12)


def test_centre_every_set_independently():
    centred = centre_size_factor_sets({None: np.array([1.0, 3.0]), "ERCC": np.array([10.0, 30.0])})
    np.testing.assert_allclose(centred[None], [0.5, 1.5])
    np.testing.assert_allclose(centred["ERCC"], [0.5, 1.5])


def test_centre_to_offset_equals_centre_then_scale():
    size_factors = {None: np.array([2.0, 4.0, 9.0])}
    direct = centre_size_factor_sets(size_factors, centre=3.0)
    composed = scale_size_factor_sets(centre_size_factor_sets(size_factors), 3.0)
    np.testing.assert_allclose(direct[None], composed[None])
    assert direct[None].mean() == pytest.approx(3.0)


def test_centre_does_not_modify_input():
    sf = np.array([2.0, 4.0])
    centre_size_factor_sets({None: sf})
    np.testing.assert_array_equal(sf, [2.0, 4.0])


def test_centre_zero_mean():
    with pytest.raises(ValueError, match="'spike'.*mean is zero"):
        centre_size_factor_sets({None: np.array([1.0, 2.0]), "spike": np.array([0.0, 0.0])})


@pytest.mark.parametrize(
    "sf,match",
    [
        (np.array([1.0, 0.0]), "finite and positive"),
        (np.array([1.0, -2.0]), "finite and positive"),
        (np.array([1.0, np.nan]), "finite and positive"),
        (np.array([1.0, 2.0, 3.0]), "number of cells"),
    ],
)
def test_validate_size_factor_sets(sf: np.ndarray, match: str):
    with pytest.raises(ValueError, match=match):
        validate_size_factor_sets({None: np.array([1.0, 1.0]), "ERCC": sf}, n_cells=2)


def test_validate_names_offending_set():
    with pytest.raises(ValueError, match="'ERCC'"):
        validate_size_factor_sets({None: np.array([1.0, 1.0]), "ERCC": np.array([1.0, 0.0])}, n_cells=2)


def test_centre_size_factors_in_container():
    adata = make_adata(size_factors_n=[2.0, 4.0])
    set_size_factors(adata, [1.0, 3.0], "ERCC")
    centre_size_factors(adata)
    np.testing.assert_allclose(adata.obs["size_factor"], [2 / 3, 4 / 3])
    np.testing.assert_allclose(adata.obs["size_factor_ERCC"], [0.5, 1.5])


def test_centre_size_factors_in_container_fails_atomically():
    adata = make_adata(size_factors_n=[2.0, 4.0])
    set_size_factors(adata, [0.0, 0.0], "ERCC")
    with pytest.raises(ValueError):
        centre_size_factors(adata)
    np.testing.assert_array_equal(adata.obs["size_factor"], [2.0, 4.0])


def test_apply_to_size_factors():
    adata = make_adata(size_factors_n=[2.0, 4.0])
    set_size_factors(adata, [1.0, 3.0], "ERCC")
    apply_to_size_factors(adata, lambda sf: sf * 2)
    np.testing.assert_allclose(adata.obs["size_factor"], [4.0, 8.0])
    np.testing.assert_allclose(adata.obs["size_factor_ERCC"], [2.0, 6.0])


def test_centre_size_factors_ignores_unregistered_columns():
    adata = make_adata(size_factors_n=[2.0, 4.0])
    adata.obs["size_factor_rank"] = [1.0, 3.0]
    centre_size_factors(adata)
    np.testing.assert_array_equal(adata.obs["size_factor_rank"], [1.0, 3.0])


def test_centre_empty_set():
    centred = centre_size_factor_sets({None: np.array([])})
    assert centred[None].shape == (0,)
