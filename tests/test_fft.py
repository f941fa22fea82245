"""
Tests für FFT-Modul.
"""

import pytest
import numpy as np

from acoustic_engine.core.errors import InvalidInputError
from acoustic_engine.core.fft import FFT


class TestFFT:
    """Tests für die vollständige zweiseitige FFT."""

    def test_output_length(self):
        """Ausgabe hat Länge 2 * nfft."""
        for nfft in (16, 101, 128):
            fft = FFT(nfft)
            result = fft.compute(np.random.randn(nfft))
            assert result.shape == (2 * nfft,)

    def test_matches_numpy_fft(self):
        """Real- und Imaginärteil sind verschränkt abgelegt."""
        data = np.random.randn(64)
        result = FFT(64).compute(data)

        expected = np.fft.fft(data)
        np.testing.assert_allclose(result[0::2], expected.real, atol=1e-12)
        np.testing.assert_allclose(result[1::2], expected.imag, atol=1e-12)

    def test_dc_component(self):
        """DC-Bin ist die Summe der Samples."""
        data = np.arange(10, dtype=np.float64)
        result = FFT(10).compute(data)

        assert result[0] == pytest.approx(45.0)
        assert result[1] == pytest.approx(0.0, abs=1e-12)

    def test_sine_peak(self):
        """Sinuston erzeugt Maximum im erwarteten Bin."""
        nfft = 128
        n = np.arange(nfft)
        data = np.sin(2 * np.pi * 8 * n / nfft)

        result = FFT(nfft).compute(data)
        magnitude = np.hypot(result[0::2], result[1::2])

        assert np.argmax(magnitude[:nfft // 2 + 1]) == 8

    def test_wrong_length(self):
        """Falsche Segmentlänge wird abgelehnt."""
        fft = FFT(100)

        with pytest.raises(InvalidInputError):
            fft.compute(np.zeros(99))
        with pytest.raises(InvalidInputError):
            fft.compute(np.zeros((10, 10)))

    def test_invalid_nfft(self):
        """nfft muss positiv sein."""
        with pytest.raises(InvalidInputError):
            FFT(0)

    def test_deterministic(self):
        """Wiederholte Aufrufe liefern bitidentische Ergebnisse."""
        fft = FFT(256)
        data = np.random.randn(256)

        np.testing.assert_array_equal(fft.compute(data), fft.compute(data))

    def test_input_unchanged(self):
        """Eingabe wird nicht verändert."""
        data = np.random.randn(32)
        original = data.copy()

        FFT(32).compute(data)

        np.testing.assert_array_equal(data, original)
