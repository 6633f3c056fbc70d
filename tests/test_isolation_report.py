"""Tests for the MS2 isolation report."""

import pytest

from rawinfo.core import ActivationType, Device, MSOrder, RunHeader, ScanRecord, TrailerField
from rawinfo.core.errors import UnrecoverableProcessingError
from rawinfo.reports import (
    collect_isolation_records,
    format_scan_record,
    isolation_header,
    isolation_report,
    read_scan_record,
)

from conftest import FakeRawSource, FakeScan, ms2_scan


HEADER = (
    "instrumentId, scanNum, msOrder, rt, precursorMass, isolationWidth, "
    "isolationWidthOffset, monoMz, activation, energy"
)


class TestIsolationHeader:
    def test_columns(self):
        assert isolation_header() == HEADER


class TestFormatScanRecord:
    def test_line(self):
        record = ScanRecord(
            instrument_id=1,
            scan_number=7,
            ms_order=MSOrder.MS2,
            retention_time=1.5,
            precursor_mass=500.25,
            isolation_width=1.6,
            isolation_width_offset=0.0,
            monoisotopic_mz=500.2512,
            activation=ActivationType.HCD,
            collision_energy=30.0,
            master_scan=6,
        )
        assert format_scan_record(record) == "1, 7, Ms2, 1.5, 500.25, 1.6, 0.0, 500.2512, HigherEnergyCollisionalDissociation, 30.0"


class TestReadScanRecord:
    def test_ms1_skipped(self, fake_source):
        fake_source.select_instrument(Device.MS, 1)
        assert read_scan_record(fake_source, 3, 1) is None

    def test_ms2(self, fake_source):
        fake_source.select_instrument(Device.MS, 1)
        record = read_scan_record(fake_source, 7, 1)
        assert record.precursor_mass == 500.25
        assert record.monoisotopic_mz == pytest.approx(500.2512)
        assert record.activation == ActivationType.HCD

    def test_missing_mono_mz_defaults_to_zero(self):
        source = FakeRawSource(scans={4: ms2_scan(321.0)})
        record = read_scan_record(source, 4, 1)
        assert record.monoisotopic_mz == 0.0
        assert record.master_scan == 0

    def test_master_scan_read_from_trailer(self):
        scan = ms2_scan(321.0)
        scan.trailer.append(TrailerField("Master Scan Number:", "3"))
        source = FakeRawSource(scans={4: scan})
        assert read_scan_record(source, 4, 1).master_scan == 3

    def test_ms3_skipped(self):
        source = FakeRawSource(scans={4: FakeScan(MSOrder.MS3, 2.0)})
        assert read_scan_record(source, 4, 1) is None


class TestIsolationReport:
    def test_single_ms2_scan_in_range(self, fake_source):
        lines = list(isolation_report(fake_source, (5, 10)))
        assert lines == [
            HEADER,
            "1, 7, Ms2, 1.5, 500.25, 1.6, 0.0, 500.2512, HigherEnergyCollisionalDissociation, 30.0",
        ]

    def test_full_range(self, fake_source):
        lines = list(isolation_report(fake_source))
        assert len(lines) == 2

    def test_range_outside_bounds(self, fake_source):
        assert list(isolation_report(fake_source, (200, 300))) == [HEADER]

    def test_single_scan_not_clipped(self):
        source = FakeRawSource(
            instruments={1: RunHeader(1, 10)},
            scans={50: ms2_scan(700.0)},
        )
        lines = list(isolation_report(source, (50,)))
        assert len(lines) == 2
        assert lines[1].startswith("1, 50, Ms2")

    def test_header_per_instrument(self):
        source = FakeRawSource(
            instruments={1: RunHeader(1, 10), 2: RunHeader(1, 10)},
            scans={7: ms2_scan(500.25)},
        )
        lines = list(isolation_report(source, (7,)))
        assert lines[0] == HEADER
        assert lines[1].startswith("1, 7, ")
        assert lines[2] == HEADER
        assert lines[3].startswith("2, 7, ")

    def test_absent_instrument_skipped(self):
        source = FakeRawSource(
            instruments={2: RunHeader(1, 10)},
            ms_count=2,
            scans={7: ms2_scan(500.25)},
        )
        lines = list(isolation_report(source))
        assert source.select_calls == [0, 1, 2]
        assert len(lines) == 2
        assert lines[0] == HEADER
        assert lines[1].startswith("2, 7, ")

    def test_scan_failure_aborts_after_earlier_lines(self):
        source = FakeRawSource(
            instruments={1: RunHeader(1, 10)},
            scans={3: ms2_scan(400.0)},
            broken_scans={5},
        )
        report = isolation_report(source)
        assert next(report) == HEADER
        assert next(report).startswith("1, 3, ")
        with pytest.raises(UnrecoverableProcessingError, match="scan 5"):
            next(report)

    def test_unparsable_trailer_aborts(self):
        scan = ms2_scan(400.0, mono_mz="garbage")
        source = FakeRawSource(instruments={1: RunHeader(1, 3)}, scans={2: scan})
        with pytest.raises(UnrecoverableProcessingError):
            list(isolation_report(source))

    def test_missing_reaction_aborts(self):
        source = FakeRawSource(instruments={1: RunHeader(1, 3)}, scans={2: FakeScan(MSOrder.MS2, 1.0)})
        with pytest.raises(UnrecoverableProcessingError, match="scan 2"):
            list(isolation_report(source))


class TestCollectIsolationRecords:
    def test_records_keep_master_scan(self):
        scan = ms2_scan(500.25, mono_mz="500.2512")
        scan.trailer.append(TrailerField("Master Scan Number:", "6"))
        source = FakeRawSource(instruments={1: RunHeader(1, 20)}, scans={7: scan})
        records = collect_isolation_records(source)
        assert len(records) == 1
        assert records[0].scan_number == 7
        assert records[0].master_scan == 6


class TestDeviceLostDuringScans:
    def test_remaining_instruments_still_reported(self):
        source = FakeRawSource(
            instruments={1: RunHeader(1, 10), 2: RunHeader(1, 10)},
            scans={3: ms2_scan(400.0), 8: ms2_scan(800.0)},
            absent_scans={(1, 5)},
        )
        lines = list(isolation_report(source))
        assert len(lines) == 5
        assert lines[0] == HEADER
        assert lines[2] == HEADER
        assert lines[1].startswith("1, 3, ")
        assert lines[3].startswith("2, 3, ")
        assert lines[4].startswith("2, 8, ")

    def test_collected_records_stop_at_lost_device(self):
        source = FakeRawSource(
            instruments={1: RunHeader(1, 10)},
            scans={3: ms2_scan(400.0), 8: ms2_scan(800.0)},
            absent_scans={(1, 5)},
        )
        assert [r.scan_number for r in collect_isolation_records(source)] == [3]


class TestReportLabels:
    def test_ms_order_labels(self):
        assert MSOrder.MS1.label == "Ms"
        assert MSOrder.MS2.label == "Ms2"
        assert MSOrder.NEUTRAL_LOSS.label == "Nl"

    def test_activation_labels(self):
        assert ActivationType.CID.label == "CollisionInducedDissociation"
        assert ActivationType.ETD.label == "ElectronTransferDissociation"

    def test_every_member_has_a_label(self):
        assert all(order.label for order in MSOrder)
        assert all(activation.label for activation in ActivationType)
