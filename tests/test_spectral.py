"""
Tests für Periodogramm, Welch-Mittelung und Energie.

Referenzwerte für das Testsignal 2 cos(s) + 3 sin(s), s = 0, 0.1, ..., 10
(nfft = 101, fs = 1000 Hz):

    MATLAB:  [Pxx, F] = periodogram(sig, [], length(sig), 1000)
    scipy:   f, Pxx = scipy.signal.periodogram(sig, 1000.0, scaling='spectrum')
"""

import pytest
import numpy as np

from acoustic_engine.core.errors import InvalidInputError
from acoustic_engine.core.fft import FFT
from acoustic_engine.core.spectral import PSD, Energy, Periodogram, WelchSpectralDensity


MATLAB_PERIODOGRAM = np.array([
    0.018821131046057503, 0.155794411914756625, 0.403962223018968447,
    0.036691691896538800, 0.013860845848032056, 0.007496823811848302,
    0.004775020226013218, 0.003339960066646203, 0.002483031568184747,
    0.001927224772328257, 0.001544815303614363, 0.001269789223587577,
    0.001065042235699044, 0.000908333515744774, 0.000785634526380712,
    0.000687722475070738, 0.000608322080169557, 0.000543038033676886,
    0.000488714531177963, 0.000443036592423639, 0.000404273888323465,
    0.000371111524459942, 0.000342535516931416, 0.000317753597900728,
    0.000296139390379196, 0.000277192371903949, 0.000260508710992309,
    0.000245759721304290, 0.000232675737391845, 0.000221033904805966,
    0.000210648833828754, 0.000201365373747474, 0.000193052975168369,
    0.000185601254086868, 0.000178916474315712, 0.000172918738164341,
    0.000167539728077807, 0.000162720880414618, 0.000158411900851216,
    0.000154569551931392, 0.000151156659045972, 0.000148141293053034,
    0.000145496096845198, 0.000143197730168098, 0.000141226412423654,
    0.000139565547442531, 0.000138201417571006, 0.000137122937103952,
    0.000136321457271676, 0.000135790616778697, 0.000135526233395330,
])

SCIPY_SPECTRUM = np.array([
    2.5055478216999097e-32, 1.5425189298490691e+00,
    3.9996259704848351e+00, 3.6328407818354924e-01,
    1.3723609750526911e-01, 7.4225978335131199e-02,
    4.7277427980329106e-02, 3.3068911550952318e-02,
    2.4584470972126325e-02, 1.9081433389388645e-02,
    1.5295201025884829e-02, 1.2572170530570076e-02,
    1.0544972630683536e-02, 8.9934011459879021e-03,
    7.7785596671356870e-03, 6.8091334165420033e-03,
    6.0229908927678039e-03, 5.3766141948207802e-03,
    4.8387577344351767e-03, 4.3865009150856130e-03,
    4.0027117655787401e-03, 3.6743715293064273e-03,
    3.3914407616970456e-03, 3.1460752267400138e-03,
    2.9320731720711333e-03, 2.7444789297421924e-03,
    2.5792941682405701e-03, 2.4332645673693378e-03,
    2.3037201721963600e-03, 2.1884545030295124e-03,
    2.0856320181063346e-03, 1.9937165717573264e-03,
    1.9114155957262716e-03, 1.8376361790780648e-03,
    1.7714502407494719e-03, 1.7120667144985850e-03,
    1.6588091888890023e-03, 1.6110978258874614e-03,
    1.5684346618930775e-03, 1.5303916032812712e-03,
    1.4966005846134332e-03, 1.4667454757727860e-03,
    1.4405554143087035e-03, 1.4177993085951900e-03,
    1.3982813111250954e-03, 1.3818371033915762e-03,
    1.3683308670394837e-03, 1.3576528426135809e-03,
    1.3497173987292706e-03, 1.3444615522645175e-03,
    1.3418438950030705e-03,
])


@pytest.fixture
def test_signal():
    """2 cos(s) + 3 sin(s) über 101 Samples."""
    s = np.arange(101) * 0.1
    return 2 * np.cos(s) + 3 * np.sin(s)


class TestPeriodogram:
    """Tests für Periodogramm."""

    def test_matches_matlab_periodogram(self, test_signal):
        """Dichte mit 1 / (nfft * fs) entspricht MATLAB periodogram."""
        nfft = len(test_signal)
        fs = 1000.0

        fft = FFT(nfft).compute(test_signal)
        psd = Periodogram(nfft, 1 / (nfft * fs)).compute(fft)

        assert psd.shape == (51,)
        np.testing.assert_allclose(psd, MATLAB_PERIODOGRAM, rtol=1e-9)

    def test_matches_scipy_spectrum(self, test_signal):
        """Leistungsspektrum mit 1 / nfft^2 entspricht scipy (detrend='constant')."""
        nfft = len(test_signal)
        detrended = test_signal - np.mean(test_signal)

        fft = FFT(nfft).compute(detrended)
        psd = Periodogram(nfft, 1 / nfft ** 2).compute(fft)

        np.testing.assert_allclose(psd, SCIPY_SPECTRUM, rtol=1e-9, atol=1e-20)

    def test_sampling_rate_scaling(self, test_signal):
        """Normierung mit 1 / fs skaliert die MATLAB-Dichte um nfft."""
        nfft = len(test_signal)
        fs = 1000.0

        fft = FFT(nfft).compute(test_signal)
        psd = Periodogram(nfft, 1 / fs).compute(fft)

        np.testing.assert_allclose(psd, MATLAB_PERIODOGRAM * nfft, rtol=1e-9)

    def test_even_nfft_nyquist_not_doubled(self):
        """Bei geradem nfft werden DC und Nyquist nicht verdoppelt."""
        nfft = 8
        # Alternierendes Signal: Energie nur im Nyquist-Bin
        data = np.array([1.0, -1.0] * 4)

        fft = FFT(nfft).compute(data)
        psd = Periodogram(nfft, 1.0).compute(fft)

        assert psd.shape == (5,)
        assert psd[-1] == pytest.approx(64.0)
        np.testing.assert_allclose(psd[:-1], 0.0, atol=1e-20)

    def test_constant_signal_dc_not_doubled(self):
        """Konstantes Signal: nur DC, nicht verdoppelt."""
        fft = FFT(16).compute(np.ones(16))
        psd = Periodogram(16, 1.0).compute(fft)

        assert psd[0] == pytest.approx(256.0)
        np.testing.assert_allclose(psd[1:], 0.0, atol=1e-20)

    def test_non_negative(self):
        """PSD-Werte sind nicht negativ."""
        fft = FFT(256).compute(np.random.randn(256))
        psd = Periodogram(256, 1 / 256).compute(fft)

        assert np.all(psd >= 0)

    def test_psd_alias(self):
        """PSD ist das Periodogramm."""
        assert PSD is Periodogram

    def test_wrong_fft_length(self):
        """Spektrum falscher Länge wird abgelehnt."""
        data = np.cos(np.arange(101) * 0.1)

        with pytest.raises(InvalidInputError):
            Periodogram(50, 1.0).compute(data)

    def test_invalid_normalization(self):
        """Normierungsfaktor muss positiv sein."""
        with pytest.raises(InvalidInputError):
            Periodogram(50, 0.0)


class TestWelch:
    """Tests für Welch-Mittelung."""

    def test_identical_periodograms(self):
        """Mittelwert identischer Periodogramme ist unverändert."""
        welch = WelchSpectralDensity(100, 1000.0)
        psd = np.random.rand(51)

        result = welch.compute([psd, psd, psd])

        np.testing.assert_allclose(result, psd, rtol=1e-15)

    def test_arithmetic_mean(self):
        """Elementweiser arithmetischer Mittelwert."""
        welch = WelchSpectralDensity(4, 4.0)

        result = welch.compute([np.array([1.0, 2.0, 3.0]), np.array([3.0, 4.0, 5.0])])

        np.testing.assert_array_equal(result, [2.0, 3.0, 4.0])

    def test_accepts_2d_array(self):
        """Periodogramme können als 2D-Array übergeben werden."""
        welch = WelchSpectralDensity(8, 8.0)
        stacked = np.random.rand(10, 5)

        np.testing.assert_allclose(welch.compute(stacked), stacked.mean(axis=0))

    def test_single_periodogram(self):
        """Ein einzelnes Periodogramm bleibt unverändert."""
        welch = WelchSpectralDensity(8, 8.0)
        psd = np.random.rand(5)

        np.testing.assert_array_equal(welch.compute([psd]), psd)

    def test_empty_input(self):
        """Leere Eingabe wird abgelehnt."""
        with pytest.raises(InvalidInputError):
            WelchSpectralDensity(8, 8.0).compute([])

    def test_length_mismatch(self):
        """Periodogramme unterschiedlicher Länge werden abgelehnt."""
        welch = WelchSpectralDensity(8, 8.0)

        with pytest.raises(InvalidInputError):
            welch.compute([np.ones(5), np.ones(4)])
        with pytest.raises(InvalidInputError):
            welch.compute([np.ones(6), np.ones(6)])

    def test_frequency_vector(self):
        """Frequenzachse passt zur Spektrumgröße."""
        welch = WelchSpectralDensity(100, 1000.0)
        freqs = welch.frequency_vector()

        assert len(freqs) == welch.spectrum_size == 51
        assert freqs[-1] == pytest.approx(500.0)

    def test_matches_scipy_welch(self):
        """Kette Hamming -> FFT -> Periodogramm -> Welch entspricht scipy.signal.welch."""
        from scipy import signal
        from acoustic_engine.core.signal_processing import HammingWindow, Segmentation

        fs = 1000.0
        nfft = 128
        data = np.random.randn(4096)

        hamming = HammingWindow(nfft, "periodic")
        fft = FFT(nfft)
        periodogram = Periodogram(nfft, 1 / (fs * hamming.normalization_factor))
        segments = Segmentation(nfft, offset=nfft // 2).compute(data)
        periodograms = [periodogram.compute(fft.compute(hamming.compute(s))) for s in segments]
        result = WelchSpectralDensity(nfft, fs).compute(periodograms)

        _, expected = signal.welch(
            data, fs=fs, window="hamming", nperseg=nfft, noverlap=nfft // 2,
            detrend=False, scaling="density",
        )
        np.testing.assert_allclose(result, expected, rtol=1e-10)


class TestEnergy:
    """Tests für Energie und SPL."""

    def test_parseval(self):
        """Energie aus Signal und FFT stimmt überein."""
        for nfft in (100, 101):
            data = np.random.randn(nfft)
            energy = Energy(nfft)
            fft = FFT(nfft).compute(data)

            assert energy.compute_raw_from_fft(fft) == pytest.approx(
                energy.compute_raw_from_signal(data), rel=1e-12
            )

    def test_energy_from_psd(self):
        """Periodogramm mit 1 / nfft erhält die Energie."""
        nfft = 128
        data = np.random.randn(nfft)
        energy = Energy(nfft)
        psd = Periodogram(nfft, 1 / nfft).compute(FFT(nfft).compute(data))

        assert energy.compute_raw_from_psd(psd) == pytest.approx(
            energy.compute_raw_from_signal(data), rel=1e-12
        )

    def test_spl_from_psd(self):
        """SPL ist 10 log10 der Summe."""
        energy = Energy(100)
        spectrum = np.ones(51)

        assert energy.compute_spl_from_psd(spectrum) == pytest.approx(10 * np.log10(51))

    def test_spl_calibration(self):
        """Kalibrierung verschiebt den Pegel um den Offset."""
        energy = Energy(100)
        spectrum = np.full(51, 2.0)

        raw = energy.compute_spl_from_psd(spectrum)
        calibrated = energy.compute_spl_from_psd(
            spectrum, v_adc=2.0, micro_sensitivity=-170.0, gain=20.0,
        )

        assert calibrated == pytest.approx(raw + 150.0 + 20 * np.log10(2.0))

    def test_spl_paths_agree(self):
        """SPL aus Signal, FFT und PSD ist identisch."""
        nfft = 64
        data = np.random.randn(nfft)
        energy = Energy(nfft)
        fft = FFT(nfft).compute(data)
        psd = Periodogram(nfft, 1 / nfft).compute(fft)

        spl = energy.compute_spl_from_signal(data)
        assert energy.compute_spl_from_fft(fft) == pytest.approx(spl)
        assert energy.compute_spl_from_psd(psd) == pytest.approx(spl)

    def test_wrong_lengths(self):
        """Falsche Längen werden abgelehnt."""
        energy = Energy(100)

        with pytest.raises(InvalidInputError):
            energy.compute_spl_from_psd(np.ones(50))
        with pytest.raises(InvalidInputError):
            energy.compute_raw_from_signal(np.ones(51))
        with pytest.raises(InvalidInputError):
            energy.compute_raw_from_fft(np.ones(100))

    def test_invalid_v_adc(self):
        """ADC-Spannung muss positiv sein."""
        with pytest.raises(InvalidInputError):
            Energy(100).compute_spl_from_psd(np.ones(51), v_adc=0.0)
