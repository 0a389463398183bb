import pytest

from multialign import AlignerConfig, ConfigurationError, DeficitPeerMode
from multialign.config import DEFAULT_NOF_STARTING_ASSEMBLIES, DEFAULT_NOF_THREADS


class TestAlignerConfig:
    def test_defaults(self):
        config = AlignerConfig()
        assert config.max_starting_assemblies == DEFAULT_NOF_STARTING_ASSEMBLIES
        assert config.n_threads == DEFAULT_NOF_THREADS
        assert config.deficit_peer_mode is DeficitPeerMode.ALL
        assert not config.tie_break_on_missing
        assert not config.skip_incomplete_assemblies

    @pytest.mark.parametrize(
        "values",
        [
            {"max_starting_assemblies": 0},
            {"n_threads": 0},
            {"n_threads": True},
            {"max_starting_assemblies": 2.5},
            {"max_local_search_iterations": 0},
            {"local_search_time_limit": -1.0},
            {"deficit_peer_mode": "nearest"},
            {"deficit_peer_mode": 3},
        ],
    )
    def test_invalid_values(self, values):
        with pytest.raises(ConfigurationError):
            AlignerConfig(**values)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            AlignerConfig(n_threads=-2)

    def test_mode_from_string(self):
        assert AlignerConfig(deficit_peer_mode="ASSIGNED").deficit_peer_mode is (
            DeficitPeerMode.ASSIGNED
        )

    def test_from_dict(self):
        config = AlignerConfig.from_dict(
            {"max_starting_assemblies": 3, "deficit_peer_mode": "assigned", "show_progress": True}
        )
        assert config.max_starting_assemblies == 3
        assert config.deficit_peer_mode is DeficitPeerMode.ASSIGNED
        assert config.show_progress

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ConfigurationError, match="nof_threads"):
            AlignerConfig.from_dict({"nof_threads": 2})

    def test_to_dict_round_trip(self):
        config = AlignerConfig(n_threads=8, tie_break_on_missing=True, local_search_time_limit=2.0)
        values = config.to_dict()
        assert values["deficit_peer_mode"] == "all"
        assert AlignerConfig.from_dict(values) == config
