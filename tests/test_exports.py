import io
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

import pandas as pd
import yaml
from scipy.io import loadmat

from alfa_topics.core.metrics import topic_metrics
from alfa_topics.core.plotting import save_field_plot
from alfa_topics.core.reports import write_topic_report
from alfa_topics.core.topic import Topic
from alfa_topics.main import main

LINES = [
    "%time,field.header.seq,field.header.stamp,field.header.frame_id,field.roll,field.mode,field.roll",
    "1531929211000000000,1,1531929211000000000,odom,0.5,AUTO,1",
    "1531929211500000000,2,1531929211500000000,odom,0.75,AUTO,2",
    "1531929212000000000,3,1531929212000000000,odom,,MANUAL,3",
]


class ExportTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmpdir = Path(self._tmp.name)
        self.csv = self.tmpdir / "nav_info-roll.csv"
        self.csv.write_text("\n".join(LINES) + "\n", encoding="utf-8")

    def tearDown(self):
        self._tmp.cleanup()


class DataFrameTests(ExportTestCase):
    def test_columns_and_types(self):
        df = Topic(self.csv, "nav_info-roll").to_dataframe()
        self.assertEqual(["date_time", "seq", "stamp", "frame_id", "roll", "mode", "roll.1"], list(df.columns))
        self.assertEqual(3, len(df))
        self.assertTrue(pd.api.types.is_datetime64_any_dtype(df["date_time"]))
        self.assertTrue(pd.api.types.is_numeric_dtype(df["roll"]))
        self.assertTrue(pd.isna(df["roll"].iloc[2]))
        self.assertEqual(["AUTO", "AUTO", "MANUAL"], df["mode"].tolist())
        self.assertEqual([1, 2, 3], df["roll.1"].tolist())

    def test_colliding_duplicate_labels_keep_every_column(self):
        p = self.tmpdir / "dup.csv"
        p.write_text("field.a,field.a,field.a.1\n1,2,3\n", encoding="utf-8")
        df = Topic(p, "dup").to_dataframe()
        self.assertEqual(["date_time", "a", "a.1", "a.1.1"], list(df.columns))
        self.assertEqual([1, 2, 3], [df["a"].iloc[0], df["a.1"].iloc[0], df["a.1.1"].iloc[0]])

    def test_metrics(self):
        m = topic_metrics(Topic(self.csv, "failure_status-engines"))
        self.assertTrue(m["is_fault"])
        self.assertEqual(3, m["n_messages"])
        self.assertEqual(3, m["n_fields"])
        self.assertAlmostEqual(1.0, m["duration_s"])
        self.assertAlmostEqual(2.0, m["rate_hz"])
        self.assertTrue(m["start_time"].startswith("2018-07-18"))

    def test_metrics_of_unloaded_topic(self):
        m = topic_metrics(Topic(topic_name="nothing"))
        self.assertEqual(0, m["n_messages"])
        self.assertEqual(0.0, m["rate_hz"])
        self.assertEqual("", m["start_time"])


class ReportTests(ExportTestCase):
    def test_csv_and_mat(self):
        topic = Topic(self.csv, "nav_info-roll")
        with redirect_stdout(io.StringIO()):
            written = write_topic_report(topic, self.tmpdir / "out" / "roll", fmt="both")
        self.assertEqual(2, len(written))
        df = pd.read_csv(self.tmpdir / "out" / "roll.csv")
        self.assertEqual(3, len(df))
        self.assertIn("mode", df.columns)

        mat = loadmat(self.tmpdir / "out" / "roll.mat", squeeze_me=True, struct_as_record=False)
        s = mat["topic"]
        self.assertEqual(0.75, float(s.roll[1]))
        self.assertEqual(3.0, float(s.roll_1[2]))

    def test_unloaded_topic_writes_nothing(self):
        self.assertEqual([], write_topic_report(Topic(), self.tmpdir / "x", fmt="csv"))
        self.assertFalse((self.tmpdir / "x.csv").exists())


class PlotTests(ExportTestCase):
    def test_numeric_fields_plotted(self):
        topic = Topic(self.csv, "nav_info-roll")
        with redirect_stdout(io.StringIO()):
            out = save_field_plot(topic, None, self.tmpdir / "plots")
        self.assertIsNotNone(out)
        self.assertTrue(out.exists())

    def test_text_only_fields_skipped(self):
        topic = Topic(self.csv, "nav_info-roll")
        with redirect_stdout(io.StringIO()):
            self.assertIsNone(save_field_plot(topic, ["mode"], self.tmpdir / "plots"))


class DriverTests(ExportTestCase):
    def test_main_prints_and_exports(self):
        cfg = {
            "input": {"path": str(self.csv), "topic_name": "nav_info-roll"},
            "print": {"start": 0, "count": 2, "separator": " | "},
            "export": {"enabled": True, "directory": str(self.tmpdir / "out"), "format": "csv"},
            "logging": {"verbose": False},
        }
        cfg_path = self.tmpdir / "config.yaml"
        cfg_path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
        buf = io.StringIO()
        with redirect_stdout(buf):
            rc = main([str(cfg_path)])
        self.assertEqual(0, rc)
        # header, rule, 2 rows and the "[OK]" notice of the csv export
        self.assertEqual(5, len(buf.getvalue().splitlines()))
        self.assertTrue((self.tmpdir / "out" / "nav_info-roll.csv").exists())

    def test_main_reports_missing_input(self):
        cfg_path = self.tmpdir / "config.yaml"
        cfg_path.write_text(yaml.safe_dump({"input": {"path": str(self.tmpdir / "missing.csv")},
                                            "logging": {"verbose": False}}), encoding="utf-8")
        with redirect_stdout(io.StringIO()):
            self.assertEqual(1, main([str(cfg_path)]))


if __name__ == "__main__":
    unittest.main()
