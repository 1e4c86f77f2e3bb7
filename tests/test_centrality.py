"""
Tests for centrality tables, re-weighting and multiplicity strategies.
"""

import math

import numpy as np
import pytest

from domain.variations import VariationType
from services.centrality import (
    Centrality,
    CentralityModel,
    NegativeBinomial,
    ReweightingParameters,
    TreeMultiplicity,
    NegativeBinomialMultiplicity,
    create_multiplicity_strategy,
)
from conftest import make_event, reweighting_definition


class TestCentralityModel:
    """Tests for CentralityModel."""

    def test_system_is_case_insensitive(self):
        model = CentralityModel("auau_200gev")

        assert model.system == "auau_200gev"
        assert len(model) == 3

    def test_unknown_system_fails(self):
        with pytest.raises(ValueError, match="Unknown collision system"):
            CentralityModel("PbPb_2760GeV")

    def test_definitions_from_config(self):
        model = CentralityModel("TEST", reweighting_definition(0.5, 0.1))

        assert model.get_centrality(0).n_classes == 6

    def test_index_out_of_range(self, centrality_model):
        with pytest.raises(IndexError):
            centrality_model.get_centrality(3)

    def test_negative_binomial_per_index(self, centrality_model):
        assert centrality_model.get_negative_binomial(1).npp < centrality_model.get_negative_binomial(0).npp
        assert centrality_model.get_negative_binomial(2).npp > centrality_model.get_negative_binomial(0).npp


class TestCentrality:
    """Tests for a single centrality table."""

    def _centrality(self, p0=0.5, p1=0.1):
        return Centrality(
            cuts=[10, 20, 50, 80],
            reweighting=ReweightingParameters(p0, p1, p0_error=0.1, p1_error=0.01),
            negative_binomial=NegativeBinomial(2.0, 2.0, 0.1),
        )

    def test_centrality_bin(self):
        centrality = self._centrality()

        assert centrality.centrality_bin(5) == -1
        assert centrality.centrality_bin(10) == 0
        assert centrality.centrality_bin(19.9) == 0
        assert centrality.centrality_bin(50) == 2
        assert centrality.centrality_bin(1000) == 3

    def test_labels(self):
        assert self._centrality().labels == ["15-20%", "10-15%", "5-10%", "0-5%"]

    def test_builtin_labels_start_at_80_percent(self, centrality_model):
        labels = centrality_model.get_centrality(0).labels

        assert labels[0] == "75-80%"
        assert labels[-1] == "0-5%"

    def test_unsorted_cuts_fail(self):
        with pytest.raises(ValueError, match="strictly increasing"):
            Centrality([10, 5], ReweightingParameters(0.5, 0.1), NegativeBinomial(2.0, 2.0, 0.1))

    def test_reweighting_value(self):
        centrality = self._centrality(p0=0.5, p1=0.1)

        assert centrality.reweighting(0.0) == pytest.approx(0.5)
        assert centrality.reweighting(10.0) == pytest.approx(1.0 - 0.5 * math.exp(-1.0))

    def test_reweighting_is_clipped(self):
        assert self._centrality(p0=2.0, p1=0.0).reweighting(100.0) == 0.0
        assert self._centrality(p0=-1.0, p1=0.0).reweighting(100.0) == 1.0

    def test_reweighting_variations_shift_parameters(self):
        centrality = self._centrality(p0=0.5, p1=0.1)

        default = centrality.reweighting(10.0)
        low = centrality.reweighting(10.0, VariationType.LOW_RW)
        high = centrality.reweighting(10.0, VariationType.HIGH_RW)

        # larger p0 and smaller p1 both lower the acceptance
        assert low < default < high
        assert centrality.reweighting(10.0, VariationType.GAUSS) == default


class TestNegativeBinomial:
    """Tests for the two-component multiplicity model."""

    def test_mean_multiplicity(self):
        nbd = NegativeBinomial(npp=2.0, k=2.0, x=0.2)

        assert nbd.n_sources(100, 300) == pytest.approx(0.8 * 50 + 0.2 * 300)
        assert nbd.mean_multiplicity(100, 300) == pytest.approx(2.0 * 100.0)

    def test_sample_mean(self):
        nbd = NegativeBinomial(npp=2.0, k=2.0, x=0.2)
        rng = np.random.default_rng(1)

        samples = [nbd.get_multiplicity(100, 300, rng) for _ in range(2000)]

        assert np.mean(samples) == pytest.approx(200.0, rel=0.05)

    def test_no_sources_gives_zero(self):
        nbd = NegativeBinomial(npp=2.0, k=2.0, x=0.2)
        assert nbd.get_multiplicity(0, 0, np.random.default_rng(1)) == 0.0

    def test_invalid_parameters(self):
        with pytest.raises(ValueError, match="npp must be positive"):
            NegativeBinomial(npp=0.0, k=2.0, x=0.1)
        with pytest.raises(ValueError, match="x must be in"):
            NegativeBinomial(npp=2.0, k=2.0, x=1.5)


class TestMultiplicityStrategies:
    """Tests for multiplicity strategies."""

    def test_tree_multiplicity(self):
        assert TreeMultiplicity().get_multiplicity(make_event(multiplicity=123.0)) == 123.0

    def test_create_strategy(self, centrality_model):
        rng = np.random.default_rng(0)

        assert isinstance(create_multiplicity_strategy("tree", centrality_model, rng), TreeMultiplicity)
        assert isinstance(
            create_multiplicity_strategy("nbd", centrality_model, rng), NegativeBinomialMultiplicity
        )

    def test_create_unknown_strategy_fails(self, centrality_model):
        with pytest.raises(ValueError, match="Unknown multiplicity mode"):
            create_multiplicity_strategy("other", centrality_model, np.random.default_rng(0))

    def test_negative_binomial_ignores_tree_value(self, centrality_model):
        strategy = NegativeBinomialMultiplicity(centrality_model, np.random.default_rng(3))

        event = make_event(npart=0, ncoll=0, multiplicity=500.0)

        assert strategy.get_multiplicity(event) == 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
