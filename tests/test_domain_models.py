"""
Unit tests for domain models.

Tests that all domain models validate correctly and are immutable.
"""

import pytest
from datetime import datetime, timedelta

from domain import (
    GlauberEvent,
    SENTINEL,
    is_available,
    VariationType,
    AxisBinning,
    AnalysisBinning,
    FileStatistics,
    RunStatistics,
    AnalysisConfig,
)


class TestGlauberEvent:
    """Tests for GlauberEvent domain model."""

    def test_create_event_with_defaults(self):
        """Test that geometry fields default to the sentinel."""
        event = GlauberEvent(b=3.2, npart=200, ncoll=600, multiplicity=250.0)

        assert event.npart == 200
        assert event.area_rp == SENTINEL
        assert event.ecc_pp4_mod == SENTINEL

    def test_negative_npart_fails(self):
        """Test that negative npart raises ValueError."""
        with pytest.raises(ValueError, match="npart must be non-negative"):
            GlauberEvent(b=1.0, npart=-1, ncoll=0, multiplicity=0.0)

    def test_negative_ncoll_fails(self):
        with pytest.raises(ValueError, match="ncoll must be non-negative"):
            GlauberEvent(b=1.0, npart=2, ncoll=-5, multiplicity=0.0)

    def test_event_is_immutable(self):
        """Test that GlauberEvent is immutable."""
        event = GlauberEvent(b=1.0, npart=2, ncoll=1, multiplicity=3.0)

        with pytest.raises(Exception):  # FrozenInstanceError
            event.b = 2.0

    def test_participant_plane_eccentricity_lookup(self):
        """Test that each order and variant maps to its own field."""
        event = GlauberEvent(
            b=1.0, npart=2, ncoll=1, multiplicity=3.0,
            ecc_pp2=0.2, ecc_pp2_mod=0.21,
            ecc_pp3=0.3, ecc_pp3_mod=0.31,
            ecc_pp4=0.4, ecc_pp4_mod=0.41,
        )

        assert event.participant_plane_eccentricity(2) == 0.2
        assert event.participant_plane_eccentricity(3) == 0.3
        assert event.participant_plane_eccentricity(4, modified=True) == 0.41

    def test_participant_plane_eccentricity_bad_order(self):
        event = GlauberEvent(b=1.0, npart=2, ncoll=1, multiplicity=3.0)

        with pytest.raises(ValueError, match="eccentricity order"):
            event.participant_plane_eccentricity(5)

    def test_is_available(self):
        """Test the sentinel boundary."""
        assert is_available(0.0)
        assert is_available(-9998.9)
        assert not is_available(-9999.0)
        assert not is_available(-10000.0)


class TestVariationType:
    """Tests for VariationType."""

    def test_twelve_types(self):
        assert len(VariationType) == 12

    def test_from_name(self):
        variation = VariationType.from_name("smallXsec")

        assert variation is VariationType.SMALL_XSEC
        assert variation.description == "small #sigma_{NN}"
        assert str(variation) == "smallXsec"

    def test_from_unknown_name_fails(self):
        with pytest.raises(ValueError, match="Unknown variation type"):
            VariationType.from_name("Default")

    def test_names_are_unique(self):
        names = [v.type_name for v in VariationType]
        assert len(set(names)) == len(names)


class TestAxisBinning:
    """Tests for AxisBinning."""

    def test_find_bin(self):
        binning = AxisBinning(10, 0.0, 10.0)

        assert binning.find_bin(0.0) == 0
        assert binning.find_bin(4.5) == 4
        assert binning.find_bin(10.0) == 9  # upper edge is inclusive
        assert binning.find_bin(-0.1) == -1
        assert binning.find_bin(10.1) == -1

    def test_edges(self):
        binning = AxisBinning(4, -1.0, 1.0)
        assert list(binning.edges) == pytest.approx([-1.0, -0.5, 0.0, 0.5, 1.0])

    def test_zero_bins_fails(self):
        with pytest.raises(ValueError, match="nbins must be positive"):
            AxisBinning(0, 0.0, 1.0)

    def test_inverted_range_fails(self):
        with pytest.raises(ValueError, match="must be greater than low"):
            AxisBinning(10, 1.0, 1.0)

    def test_analysis_binning_from_dict_overrides(self):
        binning = AnalysisBinning.from_dict({"npart": {"nbins": 100, "low": 0, "high": 400}})

        assert binning.npart == AxisBinning(100, 0.0, 400.0)
        assert binning.impact_parameter == AxisBinning(200, 0.0, 20.0)

    def test_analysis_binning_unknown_entry_fails(self):
        with pytest.raises(ValueError, match="Unknown binning entries"):
            AnalysisBinning.from_dict({"rapidity": {"nbins": 1, "low": 0, "high": 1}})


class TestRunStatistics:
    """Tests for RunStatistics domain model."""

    def test_create_valid_statistics(self):
        start = datetime.now()
        stats = RunStatistics(
            files_processed=2,
            entries_read=100,
            accepted_events=75,
            start_time=start,
            end_time=start + timedelta(seconds=30),
        )

        assert stats.rejected_events == 25
        assert stats.acceptance_rate == pytest.approx(75.0)
        assert stats.total_time_sec == pytest.approx(30.0)

    def test_accepted_exceeding_entries_fails(self):
        with pytest.raises(ValueError, match="cannot exceed"):
            RunStatistics(files_processed=1, entries_read=1, accepted_events=2, start_time=datetime.now())

    def test_end_before_start_fails(self):
        start = datetime.now()
        with pytest.raises(ValueError, match="end_time must be after start_time"):
            RunStatistics(
                files_processed=0, entries_read=0, accepted_events=0,
                start_time=start, end_time=start - timedelta(seconds=1),
            )

    def test_empty_run_acceptance_rate(self):
        stats = RunStatistics(files_processed=0, entries_read=0, accepted_events=0, start_time=datetime.now())
        assert stats.acceptance_rate == 0.0

    def test_to_dict(self):
        start = datetime.now()
        stats = RunStatistics(
            files_processed=1,
            entries_read=10,
            accepted_events=10,
            start_time=start,
            end_time=start,
            files=(FileStatistics("a.root", 10, 10, 0.5),),
        )

        result = stats.to_dict()

        assert result["accepted_events"] == 10
        assert result["acceptance_rate"] == "100.0%"
        assert result["files"][0]["path"] == "a.root"

    def test_file_statistics_rejected(self):
        stats = FileStatistics("a.root", entries=10, accepted_events=4, processing_time_sec=0.1)
        assert stats.rejected_events == 6


class TestAnalysisConfig:
    """Tests for AnalysisConfig."""

    def _config_dict(self, **analysis):
        base = {
            "type": "gauss",
            "system": "AuAu_200GeV",
            "output_path": "out.root",
            "table_dir": "tables",
            "input_list": "files.list",
        }
        base.update(analysis)
        return {"analysis": base, "run_metadata": {"run_name": "test_run"}}

    def test_from_dict(self):
        config = AnalysisConfig.from_dict(self._config_dict(reweighting=True, seed=7))

        assert config.variation is VariationType.GAUSS
        assert config.reweighting is True
        assert config.unit_weight is False
        assert config.seed == 7
        assert config.run_name == "test_run"
        assert config.multiplicity_mode == "tree"

    def test_from_dict_with_input_files(self):
        config_dict = self._config_dict(input_files=["a.root", "b.root"])
        del config_dict["analysis"]["input_list"]

        config = AnalysisConfig.from_dict(config_dict)

        assert config.input_files == ("a.root", "b.root")
        assert config.input_list is None

    def test_missing_input_fails(self):
        config_dict = self._config_dict()
        del config_dict["analysis"]["input_list"]

        with pytest.raises(ValueError, match="either input_list or input_files"):
            AnalysisConfig.from_dict(config_dict)

    def test_both_inputs_fail(self):
        with pytest.raises(ValueError, match="mutually exclusive"):
            AnalysisConfig.from_dict(self._config_dict(input_files=["a.root"]))

    def test_bad_multiplicity_mode_fails(self):
        with pytest.raises(ValueError, match="multiplicity_mode"):
            AnalysisConfig.from_dict(self._config_dict(multiplicity_mode="glauber"))

    def test_empty_output_path_fails(self):
        with pytest.raises(ValueError, match="output_path cannot be empty"):
            AnalysisConfig.from_dict(self._config_dict(output_path=""))

    def test_unknown_type_fails(self):
        with pytest.raises(ValueError, match="Unknown variation type"):
            AnalysisConfig.from_dict(self._config_dict(type="huge"))

    def test_config_is_immutable(self):
        config = AnalysisConfig.from_dict(self._config_dict())

        with pytest.raises(Exception):  # FrozenInstanceError
            config.unit_weight = True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
