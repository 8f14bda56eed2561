"""Unit tests for effective-area table loading and lookup."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from elefill import ConfigurationError, EffectiveAreaError, EffectiveAreaTable, correct_isolation


class TestEffectiveAreaTable(unittest.TestCase):
    """Validate table parsing, bin lookup, and load-time failures."""

    def _write(self, tmpdir: str, text: str) -> Path:
        path = Path(tmpdir) / "ea.txt"
        path.write_text(text, encoding="utf-8")
        return path

    def test_three_column_file_with_comments(self) -> None:
        """`eta_min eta_max area` rows and comment lines should both be accepted."""
        text = "# header\n0.0 1.0 0.10\n\n1.0 1.479 0.20\n1.479 2.5 0.30\n"
        with tempfile.TemporaryDirectory() as tmpdir:
            table = EffectiveAreaTable.from_file(self._write(tmpdir, text))
        self.assertEqual(len(table), 3)
        self.assertEqual(table.area(0.5), 0.10)
        self.assertEqual(table.area(1.2), 0.20)
        self.assertEqual(table.area(2.0), 0.30)

    def test_gap_between_bins_is_reported_with_line(self) -> None:
        """A bin that does not start at the previous upper edge names the offending row."""
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(EffectiveAreaError) as ctx:
                EffectiveAreaTable.from_file(self._write(tmpdir, "0.0 1.0 0.1\n1.5 2.5 0.2\n"))
        self.assertIn("ea.txt:2", str(ctx.exception))

    def test_two_column_file(self) -> None:
        """`eta_max area` rows should give the same lookup behavior."""
        with tempfile.TemporaryDirectory() as tmpdir:
            table = EffectiveAreaTable.from_file(self._write(tmpdir, "1.0 0.1\n2.0 0.2\n"))
        self.assertEqual(table.area(0.3), 0.1)
        self.assertEqual(table.area(1.5), 0.2)

    def test_bin_edge_belongs_to_upper_bin(self) -> None:
        """A value equal to an upper edge falls into the next bin."""
        table = EffectiveAreaTable.from_bins([(1.0, 0.1), (2.0, 0.2)])
        self.assertEqual(table.area(1.0), 0.2)

    def test_values_beyond_last_edge_use_last_bin(self) -> None:
        """The last bin is open-ended."""
        table = EffectiveAreaTable.from_bins([(1.0, 0.1), (2.0, 0.2)])
        self.assertEqual(table.area(2.0), 0.2)
        self.assertEqual(table.area(7.5), 0.2)

    def test_lookup_depends_only_on_absolute_eta(self) -> None:
        """Opposite-sign pseudorapidities share one coefficient."""
        table = EffectiveAreaTable.from_bins([(1.0, 0.1), (2.0, 0.2)])
        self.assertEqual(table.area(-1.5), table.area(1.5))
        self.assertEqual(table.area(-0.2), 0.1)

    def test_correct_isolation_formula(self) -> None:
        """Corrected sum must be `raw - area(|eta|) * rho`."""
        table = EffectiveAreaTable.from_bins([(1.0, 0.25), (5.0, 0.5)])
        self.assertEqual(correct_isolation(4.0, table, 0.7, 10.0), 4.0 - 0.25 * 10.0)
        self.assertEqual(correct_isolation(4.0, table, 1.7, 10.0), 4.0 - 0.5 * 10.0)

    def test_missing_file_raises(self) -> None:
        """Unreadable files are configuration errors."""
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(EffectiveAreaError):
                EffectiveAreaTable.from_file(Path(tmpdir) / "absent.txt")

    def test_malformed_rows_raise(self) -> None:
        """Non-numeric rows, wrong widths, unordered edges, gaps, overlaps, and empty files must all fail."""
        bad_documents = [
            "0.0 1.0 abc\n",
            "0.0 1.0 0.1 0.2\n",
            "1.0 0.1\n0.5 0.2\n",
            "1.0 0.1\n1.0 0.2\n",
            "# only a comment\n",
            "1.0 0.5 0.1\n",
            "0.0 1.0 0.1\n1.5 2.5 0.2\n",
            "0.0 1.5 0.1\n1.0 2.5 0.2\n",
            "0.5 1.0 0.1\n1.0 2.5 0.2\n",
        ]
        for text in bad_documents:
            with self.subTest(text=text), tempfile.TemporaryDirectory() as tmpdir:
                with self.assertRaises(EffectiveAreaError) as ctx:
                    EffectiveAreaTable.from_file(self._write(tmpdir, text))
                self.assertIsInstance(ctx.exception, ConfigurationError)
                self.assertIn("ea.txt", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
