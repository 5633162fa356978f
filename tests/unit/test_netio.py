"""Tests for the I/O enrichment collectors."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import psutil

from netmon.collector import NullNetIOCollector, collect_once, new_netio_collector
from netmon.collector.platform.linux import ProcNetIOCollector, parse_net_dev
from netmon.collector.platform.macos import NettopNetIOCollector, parse_nettop_output
from netmon.snapshot.models import NetIOStats, Snapshot

NET_DEV = """\
Inter-|   Receive                                                |  Transmit
 face |bytes    packets errs drop fifo frame compressed multicast|bytes    packets errs drop fifo colls carrier compressed
    lo: 9999999     100    0    0    0     0          0         0  9999999     100    0    0    0     0       0          0
  eth0: 1000        10    0    0    0     0          0         0  2000        20    0    0    0     0       0          0
 wlan0: 500          5    0    0    0     0          0         0  300          3    0    0    0     0       0          0
"""


class TestParseNettop:
    def test_accumulates_records_for_same_pid(self):
        stats = parse_nettop_output("worker.123\t1000\t2000\nworker.123\t500\t300\n")
        assert stats[123].bytes_recv == 1500
        assert stats[123].bytes_sent == 2300

    def test_header_and_blank_lines_ignored(self):
        output = "                     bytes_in   bytes_out\n\nsshd.88   10   20\n"
        stats = parse_nettop_output(output)
        assert list(stats) == [88]

    def test_leading_whitespace_tolerated(self):
        stats = parse_nettop_output("   launchd.1   7   8")
        assert stats[1].bytes_recv == 7
        assert stats[1].bytes_sent == 8

    def test_name_with_spaces_and_dots(self):
        stats = parse_nettop_output("Google Chrome H.v2.4521   100   200")
        assert stats[4521].bytes_recv == 100

    def test_malformed_lines_skipped(self):
        output = "noseparator 1 2\napp.12 x 2\napp.13 5\nok.14 1 1\n"
        assert list(parse_nettop_output(output)) == [14]


class TestNettopCollector:
    @patch("netmon.collector.platform.macos.subprocess.run")
    def test_missing_tool_returns_empty(self, mock_run: MagicMock):
        mock_run.side_effect = FileNotFoundError("nettop")
        assert NettopNetIOCollector().collect() == {}

    @patch("netmon.collector.platform.macos.subprocess.run")
    def test_denied_returns_empty(self, mock_run: MagicMock):
        mock_run.side_effect = subprocess.CalledProcessError(1, ["nettop"])
        assert NettopNetIOCollector().collect() == {}

    @patch("netmon.collector.platform.macos.subprocess.run")
    def test_parses_output(self, mock_run: MagicMock):
        mock_run.return_value = MagicMock(stdout="curl.77   10   20\n")
        stats = NettopNetIOCollector().collect()
        assert stats[77].bytes_sent == 20
        assert mock_run.call_args.args[0][0] == "nettop"


class TestProcNetDev:
    def test_sums_non_loopback(self):
        assert parse_net_dev(NET_DEV) == (1500, 2300)

    def test_short_lines_ignored(self):
        assert parse_net_dev("h1\nh2\neth0: 1 2 3\n") == (0, 0)


def _fake_proc(root: Path, pid: int, namespace: str, net_dev: str = NET_DEV) -> None:
    pid_dir = root / str(pid)
    (pid_dir / "ns").mkdir(parents=True)
    (pid_dir / "net").mkdir()
    os.symlink(namespace, pid_dir / "ns" / "net")
    (pid_dir / "net" / "dev").write_text(net_dev)


class TestProcNetIOCollector:
    @patch("netmon.collector.platform.linux.psutil.pids")
    def test_one_representative_per_namespace(self, mock_pids: MagicMock, tmp_path: Path):
        _fake_proc(tmp_path, 7, "net:[4026531840]")
        _fake_proc(tmp_path, 3, "net:[4026531840]")
        _fake_proc(tmp_path, 50, "net:[4026532000]")
        # Enumeration order must not decide the representative
        mock_pids.return_value = [50, 7, 3]

        stats = ProcNetIOCollector(proc_root=tmp_path).collect()

        assert sorted(stats) == [3, 50]
        assert stats[3].bytes_recv == 1500
        assert stats[3].bytes_sent == 2300

    @patch("netmon.collector.platform.linux.psutil.pids")
    def test_unreadable_namespace_skipped(self, mock_pids: MagicMock, tmp_path: Path):
        _fake_proc(tmp_path, 9, "net:[1]")
        mock_pids.return_value = [2, 9]  # pid 2 has no /proc entry

        stats = ProcNetIOCollector(proc_root=tmp_path).collect()

        assert list(stats) == [9]

    @patch("netmon.collector.platform.linux.psutil.pids")
    def test_zero_counters_not_reported(self, mock_pids: MagicMock, tmp_path: Path):
        _fake_proc(tmp_path, 5, "net:[1]", net_dev="h1\nh2\n    lo: 1 0 0 0 0 0 0 0 1 0 0 0 0 0 0 0\n")
        mock_pids.return_value = [5]

        assert ProcNetIOCollector(proc_root=tmp_path).collect() == {}

    @patch("netmon.collector.platform.linux.psutil.pids")
    def test_listing_failure_returns_empty(self, mock_pids: MagicMock, tmp_path: Path):
        mock_pids.side_effect = psutil.AccessDenied()
        assert ProcNetIOCollector(proc_root=tmp_path).collect() == {}


def test_factory_selects_platform_variant():
    assert isinstance(new_netio_collector("Linux"), ProcNetIOCollector)
    assert isinstance(new_netio_collector("Darwin"), NettopNetIOCollector)
    assert isinstance(new_netio_collector("Windows"), NullNetIOCollector)


def test_collect_once_survives_enrichment_failure():
    snapshot = Snapshot()
    collector = MagicMock()
    collector.collect.return_value = snapshot
    netio = MagicMock()
    netio.collect.side_effect = RuntimeError("broken")

    result, io_stats = collect_once(collector=collector, netio=netio)

    assert result is snapshot
    assert io_stats == {}


def test_collect_once_returns_stats():
    collector = MagicMock()
    collector.collect.return_value = Snapshot()
    netio = MagicMock()
    netio.collect.return_value = {1: NetIOStats(bytes_recv=1, bytes_sent=2)}

    _, io_stats = collect_once(collector=collector, netio=netio)

    assert io_stats[1].bytes_sent == 2
