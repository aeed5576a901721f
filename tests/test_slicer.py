import unittest

import numpy as np

from wavenib.errors import FormatError, SliceSpecError
from wavenib.slicer import (
    SliceSpec,
    Window,
    iter_slices,
    plan_windows,
    sample_offsets,
    slice_stream,
)
from wavenib.wav import decode_wav_bytes, encode_wav_bytes


class TestSliceSpec(unittest.TestCase):
    def test_defaults(self) -> None:
        spec = SliceSpec()
        self.assertEqual((spec.slice_count, spec.resolution), (16, 16))
        self.assertIsNone(spec.samples_per_slice)
        self.assertFalse(spec.extend_edge)

    def test_zero_counts_rejected(self) -> None:
        for kwargs in ({"slice_count": 0}, {"resolution": 0}, {"samples_per_slice": 0}):
            with self.assertRaises(SliceSpecError):
                SliceSpec(**kwargs)

    def test_non_integer_fields_rejected(self) -> None:
        with self.assertRaises(SliceSpecError):
            SliceSpec(slice_count=2.5)
        with self.assertRaises(SliceSpecError):
            SliceSpec(resolution=True)
        with self.assertRaises(SliceSpecError):
            SliceSpec(extend_edge="yes")

    def test_spec_error_is_format_error(self) -> None:
        with self.assertRaises(FormatError):
            SliceSpec(slice_count=-1)

    def test_resolve_fills_default_length(self) -> None:
        spec = SliceSpec(slice_count=3).resolve(100)
        self.assertEqual(spec.samples_per_slice, 33)

    def test_resolve_rejects_stream_shorter_than_count(self) -> None:
        with self.assertRaises(SliceSpecError):
            SliceSpec(slice_count=8).resolve(5)

    def test_resolve_rejects_overlong_slice(self) -> None:
        with self.assertRaises(SliceSpecError):
            SliceSpec(slice_count=3, samples_per_slice=34).resolve(100)

    def test_resolve_extend_allows_up_to_stream_length(self) -> None:
        spec = SliceSpec(slice_count=1, samples_per_slice=100, extend_edge=True).resolve(100)
        self.assertEqual(spec.samples_per_slice, 100)
        with self.assertRaises(SliceSpecError):
            SliceSpec(slice_count=1, samples_per_slice=101, extend_edge=True).resolve(100)

    def test_spec_is_immutable(self) -> None:
        spec = SliceSpec()
        with self.assertRaises(AttributeError):
            spec.slice_count = 4  # type: ignore[misc]


class TestWindows(unittest.TestCase):
    def test_nominal_grid_uses_floor_division(self) -> None:
        windows = plan_windows(100, SliceSpec(slice_count=3))
        self.assertEqual([w.start for w in windows], [0, 33, 66])
        self.assertTrue(all(w.length == 33 for w in windows))

    def test_extend_moves_only_the_last_window(self) -> None:
        windows = plan_windows(100, SliceSpec(slice_count=3, samples_per_slice=40, extend_edge=True))
        self.assertEqual([w.start for w in windows], [0, 33, 60])
        self.assertEqual(windows[-1].stop, 100)
        self.assertEqual(windows[-1].stop - 1, 99)

    def test_extend_with_short_length_ends_at_stream_end(self) -> None:
        windows = plan_windows(100, SliceSpec(slice_count=4, samples_per_slice=10, extend_edge=True))
        self.assertEqual([w.start for w in windows], [0, 25, 50, 90])

    def test_extend_rejects_middle_window_overrun(self) -> None:
        spec = SliceSpec(slice_count=3, samples_per_slice=80, extend_edge=True)
        with self.assertRaises(SliceSpecError):
            plan_windows(100, spec)

    def test_windows_are_views(self) -> None:
        stream = np.arange(10, dtype=np.uint16)
        view = Window(2, 5).view(stream)
        self.assertTrue(np.shares_memory(view, stream))
        np.testing.assert_array_equal(view, [2, 3, 4, 5, 6])

    def test_non_dividing_lengths(self) -> None:
        np.testing.assert_array_equal(sample_offsets(8, 4), [0, 2, 4, 6])
        np.testing.assert_array_equal(sample_offsets(5, 3), [0, 1, 3])
        np.testing.assert_array_equal(sample_offsets(3, 7), [0, 0, 0, 1, 1, 2, 2])
        for length, res in [(33, 16), (7, 32), (100, 9)]:
            offs = sample_offsets(length, res)
            self.assertEqual(offs.size, res)
            self.assertTrue((offs >= 0).all() and (offs < length).all())
            self.assertTrue((np.diff(offs) >= 0).all())


class TestSliceStream(unittest.TestCase):
    def test_ramp_single_slice(self) -> None:
        stream = np.arange(8, dtype=np.uint16) * 0x1000
        out = slice_stream(stream, SliceSpec(slice_count=1, samples_per_slice=8, resolution=4))
        np.testing.assert_array_equal(out, [[0, 2, 4, 6]])

    def test_wide_ramp_through_decoder(self) -> None:
        stream = np.arange(8, dtype=np.int32) * 0x2000
        pcm = (stream - 0x8000).astype(np.int16)
        decoded = decode_wav_bytes(encode_wav_bytes(pcm))
        np.testing.assert_array_equal(decoded, stream)

        out = slice_stream(decoded, SliceSpec(slice_count=1, samples_per_slice=8, resolution=4))
        self.assertEqual(out.dtype, np.uint8)
        np.testing.assert_array_equal(out, [[0, 4, 8, 12]])

    def test_shape_and_range(self) -> None:
        rng = np.random.default_rng(0)
        stream = rng.integers(0, 65536, size=1000).astype(np.uint16)
        out = slice_stream(stream, SliceSpec(slice_count=7, resolution=32))
        self.assertEqual(out.shape, (7, 32))
        self.assertLessEqual(int(out.max()), 15)

    def test_each_level_comes_from_its_window(self) -> None:
        # Every slice holds one constant value so windows can be told apart.
        stream = np.repeat(np.arange(4, dtype=np.uint16) * 0x4000 + 0x100, 25)
        out = slice_stream(stream, SliceSpec(slice_count=4, resolution=5))
        np.testing.assert_array_equal(out, np.repeat([[0], [4], [8], [12]], 5, axis=1))

    def test_extend_last_slice_reads_stream_tail(self) -> None:
        stream = np.zeros(100, dtype=np.uint16)
        stream[90:] = 0xF000
        plain = slice_stream(stream, SliceSpec(slice_count=4, samples_per_slice=10, resolution=2))
        extended = slice_stream(
            stream,
            SliceSpec(slice_count=4, samples_per_slice=10, resolution=2, extend_edge=True),
        )
        np.testing.assert_array_equal(plain[-1], [0, 0])
        np.testing.assert_array_equal(extended[-1], [15, 15])
        np.testing.assert_array_equal(plain[:-1], extended[:-1])

    def test_deterministic(self) -> None:
        rng = np.random.default_rng(1)
        stream = rng.integers(0, 65536, size=517).astype(np.uint16)
        spec = SliceSpec(slice_count=5, resolution=24, samples_per_slice=77)
        a = slice_stream(stream, spec)
        b = slice_stream(stream, spec)
        self.assertEqual(a.tobytes(), b.tobytes())

    def test_input_not_modified(self) -> None:
        stream = np.arange(64, dtype=np.uint16) * 1000
        before = stream.copy()
        slice_stream(stream, SliceSpec(slice_count=4, resolution=8))
        np.testing.assert_array_equal(stream, before)

    def test_iter_slices_validates_eagerly(self) -> None:
        stream = np.zeros(10, dtype=np.uint16)
        with self.assertRaises(SliceSpecError):
            iter_slices(stream, SliceSpec(slice_count=20))

    def test_iter_slices_matches_slice_stream(self) -> None:
        stream = np.arange(300, dtype=np.uint16) * 200
        spec = SliceSpec(slice_count=3, resolution=10)
        rows = list(iter_slices(stream, spec))
        np.testing.assert_array_equal(np.stack(rows), slice_stream(stream, spec))

    def test_rejects_multichannel_array(self) -> None:
        with self.assertRaises(ValueError):
            slice_stream(np.zeros((10, 2), dtype=np.uint16), SliceSpec(slice_count=1))


if __name__ == "__main__":
    unittest.main()
