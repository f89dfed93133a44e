from __future__ import annotations

from decimal import Decimal
from pathlib import Path
import tempfile
import unittest

import numpy as np

from plotkit import PlotDataError
from plotkit.adapters import coerce_labels, coerce_values
import main as cli


class CoerceValuesTests(unittest.TestCase):
    def test_sequences_become_float_arrays(self) -> None:
        out = coerce_values([1, 2.5, Decimal("3.25"), "4"])
        self.assertEqual(out.dtype, np.float64)
        self.assertEqual(out.tolist(), [1.0, 2.5, 3.25, 4.0])

    def test_integer_ndarray(self) -> None:
        out = coerce_values(np.arange(3, dtype=np.int32))
        self.assertEqual(out.tolist(), [0.0, 1.0, 2.0])

    def test_non_finite_values_are_rejected(self) -> None:
        for bad in ([1.0, float("nan")], [float("inf")], [1, None]):
            with self.subTest(bad=bad):
                with self.assertRaises(PlotDataError):
                    coerce_values(bad)

    def test_non_numeric_values_are_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            coerce_values([1, "two"])
        with self.assertRaises(PlotDataError):
            coerce_values("123")
        with self.assertRaises(PlotDataError):
            coerce_values(np.zeros((2, 2)))

    def test_labels_keep_their_type(self) -> None:
        self.assertEqual(coerce_labels(("a", "b")), ["a", "b"])
        self.assertEqual(coerce_labels(np.asarray([2008, 2009])), [2008, 2009])
        with self.assertRaises(PlotDataError):
            coerce_labels("ab")

    def test_dataframe_inputs(self) -> None:
        try:
            import pandas as pd
        except Exception:
            self.skipTest("pandas is not installed")

        df = pd.DataFrame({"name": ["x", "y"], "value": [1, 2]}, index=[10, 20])
        self.assertEqual(coerce_values("value", data=df).tolist(), [1.0, 2.0])
        self.assertEqual(coerce_labels(None, data=df), [10, 20])
        self.assertEqual(coerce_values(df).tolist(), [1.0, 2.0])
        with self.assertRaises(PlotDataError):
            coerce_values("missing", data=df)
        with self.assertRaises(PlotDataError):
            coerce_values([1, 2], data={"value": [1, 2]})

    def test_tensor_inputs(self) -> None:
        try:
            import torch
        except Exception:
            self.skipTest("torch is not installed")

        self.assertEqual(coerce_values(torch.tensor([1.5, 2.5])).tolist(), [1.5, 2.5])
        self.assertEqual(coerce_labels(torch.tensor([3, 4])), [3, 4])
        with self.assertRaises(PlotDataError):
            coerce_values(torch.zeros((2, 2)))


class CommandLineTests(unittest.TestCase):
    def test_bar_command_writes_png(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "bars.png"
            code = cli.main(
                [
                    "bar",
                    "--x", "2008", "2009", "2010",
                    "--y", "320", "-100", "420",
                    "--stack", "50,50,50",
                    "--hatch", "forward_slash",
                    "--out", str(out),
                    "--width", "320",
                    "--height", "240",
                ]
            )
            self.assertEqual(code, 0)
            self.assertTrue(out.exists())

    def test_histogram_command_writes_png(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "hist.png"
            code = cli.main(["histogram", "--values", "1", "2", "2", "9", "--bins", "3", "--step", "--out", str(out)])
            self.assertEqual(code, 0)
            self.assertTrue(out.exists())

    def test_mismatched_bar_input_is_a_usage_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["bar", "--x", "a", "--y", "1", "2", "--out", str(Path(tmp) / "x.png")])
        self.assertEqual(ctx.exception.code, 2)

    def test_hex_colors(self) -> None:
        self.assertEqual(cli._parse_color("#ff8000"), (255, 128, 0, 255))
        self.assertEqual(cli._parse_color("00000080"), (0, 0, 0, 128))


if __name__ == "__main__":
    unittest.main()
