"""Tests for command option and source state validation."""

import pytest

from rawinfo.config import InfoOptions, IsolationOptions
from rawinfo.core.errors import SourceStateError, ValidationError
from rawinfo.validation import (
    validate_file,
    validate_info_options,
    validate_isolation_options,
    validate_opened_source,
)

from conftest import FakeRawSource


class TestValidateFile:
    def test_existing_file(self, raw_file):
        assert validate_file(str(raw_file)) == raw_file

    def test_empty(self):
        with pytest.raises(ValidationError, match="can't be an empty string"):
            validate_file("")

    def test_whitespace(self):
        with pytest.raises(ValidationError, match="can't be an empty string"):
            validate_file("   ")

    def test_missing(self, tmp_path):
        missing = str(tmp_path / "missing.raw")
        with pytest.raises(ValidationError, match="File doesn't exist"):
            validate_file(missing)

    def test_directory_is_not_a_file(self, tmp_path):
        with pytest.raises(ValidationError, match="File doesn't exist"):
            validate_file(str(tmp_path))


class TestValidateOptions:
    def test_info(self, raw_file):
        validate_info_options(InfoOptions(file=str(raw_file)))

    def test_isolation_with_range(self, raw_file):
        validate_isolation_options(IsolationOptions(file=str(raw_file), scan_numbers=(5, 10)))

    def test_isolation_bad_range(self, raw_file):
        with pytest.raises(ValidationError, match="Higher bound"):
            validate_isolation_options(IsolationOptions(file=str(raw_file), scan_numbers=(10, 5)))

    def test_isolation_file_checked_first(self, tmp_path):
        options = IsolationOptions(file=str(tmp_path / "missing.raw"), scan_numbers=(0,))
        with pytest.raises(ValidationError, match="File doesn't exist"):
            validate_isolation_options(options)


class TestValidateOpenedSource:
    def test_ok(self):
        validate_opened_source(FakeRawSource())

    def test_not_open(self):
        with pytest.raises(SourceStateError, match="Unable to access the RAW file"):
            validate_opened_source(FakeRawSource(is_open=False))

    def test_error(self):
        with pytest.raises(SourceStateError, match=r"Error opening \(corrupt header\) - fake.raw"):
            validate_opened_source(FakeRawSource(has_error=True))

    def test_in_acquisition(self):
        with pytest.raises(SourceStateError, match="still being acquired: 'fake.raw'"):
            validate_opened_source(FakeRawSource(in_acquisition=True))

    def test_not_open_checked_before_error(self):
        source = FakeRawSource(is_open=False, has_error=True, in_acquisition=True)
        with pytest.raises(SourceStateError, match="Unable to access"):
            validate_opened_source(source)
