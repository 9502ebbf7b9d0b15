"""Tests for OffsetFilter."""

import pytest

from rowflow.plugins.config_base import PluginConfigError
from rowflow.plugins.filters.offset import OffsetFilter, OffsetFilterConfig


class TestOffsetFilter:
    def test_offset_only(self) -> None:
        flt = OffsetFilter(offset=2)

        assert [flt(i) for i in range(5)] == [False, False, True, True, True]

    def test_limit_only(self) -> None:
        flt = OffsetFilter(limit=2)

        assert [flt(i) for i in range(4)] == [True, True, False, False]
        assert flt.limit_reached

    def test_offset_and_limit(self) -> None:
        flt = OffsetFilter(offset=1, limit=2)

        assert [i for i in range(10) if flt(i)] == [1, 2]

    def test_zero_limit_passes_nothing(self) -> None:
        flt = OffsetFilter(limit=0)

        assert not any(flt(i) for i in range(3))

    def test_limit_not_reached(self) -> None:
        flt = OffsetFilter(limit=5)
        flt("a")

        assert not flt.limit_reached
        assert not OffsetFilter().limit_reached

    def test_config_rejects_negative(self) -> None:
        with pytest.raises(PluginConfigError):
            OffsetFilterConfig.from_dict({"limit": -1})
