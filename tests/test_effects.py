import numpy as np
import pytest

from fryer.clip import (
    ClipFunction,
    ClipKind,
    diode,
    evaluate_clip,
    hard_clip,
    parse_clip,
    soft_clip,
)
from fryer.effects import boost, db_to_amplitude, downmix_to_mono

ALL_CLIPS = [hard_clip, soft_clip, diode]
SLOPES = [0.1, 0.5, 1.0, 3.0, 10.0]


# Helpers


def make_sweep(n: int = 4001, peak: float = 50.0) -> np.ndarray:
    """Finite samples well beyond [-1, 1], including exact zero."""
    return np.linspace(-peak, peak, n)


class TestClipFunctions:
    """Tests for the hard / soft / diode transfer curves."""

    @pytest.mark.parametrize("factory", ALL_CLIPS)
    @pytest.mark.parametrize("slope", SLOPES)
    def test_output_bounded(self, factory, slope: float) -> None:
        result: np.ndarray = factory(slope)(make_sweep())
        assert np.all(result >= -1.0)
        assert np.all(result <= 1.0)

    def test_hard_clip_scales_then_clamps(self) -> None:
        clip: ClipFunction = hard_clip(2.0)
        assert clip(0.25) == pytest.approx(0.5)
        assert clip(0.75) == 1.0
        assert clip(-3.0) == -1.0

    def test_soft_clip_is_tanh(self) -> None:
        x: np.ndarray = make_sweep(101, peak=2.0)
        np.testing.assert_allclose(soft_clip(3.0)(x), np.tanh(x * 3.0))

    def test_diode_power_law(self) -> None:
        clip: ClipFunction = diode(2.0)
        assert clip(0.25) == pytest.approx(0.5)
        assert clip(-0.25) == pytest.approx(-0.5)

    @pytest.mark.parametrize("slope", SLOPES)
    def test_diode_preserves_sign(self, slope: float) -> None:
        x: np.ndarray = make_sweep()
        result: np.ndarray = diode(slope)(x)
        np.testing.assert_array_equal(np.sign(result), np.sign(x))

    def test_diode_zero_is_zero(self) -> None:
        result = diode(0.5)(0.0)
        assert result == 0.0
        assert not np.isnan(result)

    def test_scalar_in_scalar_out(self) -> None:
        assert isinstance(soft_clip(1.0)(0.3), float)

    def test_array_shape_preserved(self) -> None:
        x: np.ndarray = np.zeros((2, 64))
        assert hard_clip()(x).shape == (2, 64)

    @pytest.mark.parametrize("slope", [0.0, -1.0])
    def test_non_positive_slope_rejected(self, slope: float) -> None:
        with pytest.raises(ValueError, match="slope must be positive"):
            ClipFunction(ClipKind.HARD, slope)

    def test_call_matches_evaluate(self) -> None:
        clip: ClipFunction = diode(4.0)
        x: np.ndarray = make_sweep(33, peak=1.0)
        np.testing.assert_array_equal(clip(x), evaluate_clip(clip, x))

    def test_parse_clip_by_name(self) -> None:
        assert parse_clip("HARD", 2.0) == hard_clip(2.0)
        assert parse_clip("diode", 4.0).kind is ClipKind.DIODE

    def test_parse_clip_unknown_name(self) -> None:
        with pytest.raises(ValueError, match="Unknown clip function"):
            parse_clip("fuzz", 1.0)

    def test_str_shows_kind_and_slope(self) -> None:
        assert str(soft_clip(10.0)) == "soft(10)"


class TestBoost:
    """Tests for the gain stage."""

    def test_db_to_amplitude(self) -> None:
        assert db_to_amplitude(0.0) == 1.0
        assert db_to_amplitude(20.0) == pytest.approx(10.0)
        assert db_to_amplitude(-6.0206) == pytest.approx(0.5, abs=1e-4)

    @pytest.mark.parametrize("factory", ALL_CLIPS)
    @pytest.mark.parametrize("gain_db", [-12.0, 0.0, 6.0, 10.0])
    def test_matches_formula(self, factory, gain_db: float) -> None:
        clip: ClipFunction = factory(2.5)
        samples: np.ndarray = np.random.default_rng(7).uniform(-1, 1, size=(2, 256))
        expected: np.ndarray = clip(samples * 10.0 ** (gain_db / 20.0))
        np.testing.assert_allclose(boost(samples, gain_db, clip), expected)

    def test_zero_db_hard_unity_is_identity(self) -> None:
        samples: np.ndarray = np.linspace(-1.0, 1.0, 101)[np.newaxis, :]
        np.testing.assert_allclose(boost(samples, 0.0, hard_clip(1.0)), samples)

    def test_does_not_mutate_input(self) -> None:
        samples: np.ndarray = np.full((1, 32), 0.5)
        original: np.ndarray = samples.copy()
        boost(samples, 10.0, soft_clip(10.0))
        np.testing.assert_array_equal(samples, original)

    def test_handles_any_channel_count(self) -> None:
        samples: np.ndarray = np.full((5, 10), 0.1)
        assert boost(samples, 3.0, hard_clip()).shape == (5, 10)

    def test_heavy_boost_pins_to_rails(self) -> None:
        samples: np.ndarray = np.array([[0.5, -0.5]])
        result: np.ndarray = boost(samples, 60.0, hard_clip(1.0))
        np.testing.assert_array_equal(result, [[1.0, -1.0]])


class TestDownmixToMono:
    """Tests for channel averaging."""

    def test_stereo_average(self) -> None:
        samples: np.ndarray = np.vstack([np.full(500, 0.2), np.full(500, 0.6)])
        result: np.ndarray = downmix_to_mono(samples)
        assert result.shape == (1, 500)
        np.testing.assert_allclose(result[0], 0.4)

    def test_matches_mean_for_many_channels(self) -> None:
        samples: np.ndarray = np.random.default_rng(3).uniform(-1, 1, size=(6, 300))
        np.testing.assert_allclose(downmix_to_mono(samples)[0], samples.mean(axis=0))

    def test_mono_is_identity(self) -> None:
        samples: np.ndarray = np.random.default_rng(5).uniform(-1, 1, size=(1, 300))
        result: np.ndarray = downmix_to_mono(samples)
        np.testing.assert_array_equal(result, samples)
        assert result is not samples

    def test_idempotent(self) -> None:
        samples: np.ndarray = np.random.default_rng(9).uniform(-1, 1, size=(2, 64))
        once: np.ndarray = downmix_to_mono(samples)
        np.testing.assert_array_equal(downmix_to_mono(once), once)

    def test_zero_channels_rejected(self) -> None:
        with pytest.raises(ValueError, match="no channels"):
            downmix_to_mono(np.zeros((0, 10)))

    def test_one_dimensional_rejected(self) -> None:
        with pytest.raises(ValueError, match="channels, frames"):
            downmix_to_mono(np.zeros(10))

    def test_does_not_mutate_input(self) -> None:
        samples: np.ndarray = np.vstack([np.ones(8), -np.ones(8)])
        original: np.ndarray = samples.copy()
        downmix_to_mono(samples)
        np.testing.assert_array_equal(samples, original)
