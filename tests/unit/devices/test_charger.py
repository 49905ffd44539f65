"""Tests for the BenderCharger device."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pybendercc.api import ChargeStatus
from pybendercc.devices import (
    BenderCharger,
    ChargerFeatures,
    compose_charger_class,
    format_diagnostics,
)
from pybendercc.exceptions import ProtocolError, ValidationError
from pybendercc.registers import LayoutVariant
from pybendercc.transports.exceptions import TransportWriteError

if TYPE_CHECKING:
    from conftest import FakeRegisterTransport


class TestStatus:
    """Tests for status()."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (1, ChargeStatus.A),
            (2, ChargeStatus.B),
            (3, ChargeStatus.C),
            (4, ChargeStatus.C),
        ],
    )
    async def test_status_mapping(
        self, bare_transport: FakeRegisterTransport, raw: int, expected: ChargeStatus
    ) -> None:
        """Control pilot states map to IEC 61851 states, D charges as C."""
        charger = await BenderCharger.from_transport(bare_transport)
        bare_transport.set_u16(122, raw)

        assert await charger.status() is expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", [0, 5, 0xFFFF])
    async def test_invalid_status(self, bare_transport: FakeRegisterTransport, raw: int) -> None:
        """Unknown states are protocol errors."""
        charger = await BenderCharger.from_transport(bare_transport)
        bare_transport.set_u16(122, raw)

        with pytest.raises(ProtocolError, match=f"invalid status: {raw}"):
            await charger.status()

    def test_is_connected(self) -> None:
        """Vehicle is connected in states B and C."""
        assert not ChargeStatus.A.is_connected
        assert ChargeStatus.B.is_connected
        assert ChargeStatus.C.is_connected
        assert not ChargeStatus.NONE.is_connected


class TestCurrentControl:
    """Tests for enable(), enabled() and max_current()."""

    @pytest.mark.asyncio
    async def test_legacy_round_trip(self, legacy_transport: FakeRegisterTransport) -> None:
        """Whole amp controllers write and read register 1000."""
        charger = await BenderCharger.from_transport(legacy_transport)
        assert charger.current_register == 1000
        assert not await charger.enabled()

        await charger.max_current(16)
        await charger.enable(True)

        assert legacy_transport.u16(1000) == 16
        assert await charger.enabled()

        await charger.enable(False)

        assert legacy_transport.u16(1000) == 0
        assert not await charger.enabled()
        assert charger.last_commanded_current == 16

    @pytest.mark.asyncio
    async def test_fine_control_uses_tenths(
        self, current_transport: FakeRegisterTransport
    ) -> None:
        """With fine control the cached current is kept in 0.1 A."""
        charger = await BenderCharger.from_transport(current_transport)
        assert charger.current_register == 1001

        await charger.max_current(16)

        assert current_transport.writes == [(1000, 1, b"\x00\x10")]
        assert charger.last_commanded_current == 160

        await charger.enable(True)

        assert current_transport.u16(1001) == 160
        assert await charger.enabled()

    @pytest.mark.asyncio
    async def test_enable_before_max_current_uses_minimum(
        self,
        current_transport: FakeRegisterTransport,
        legacy_transport: FakeRegisterTransport,
    ) -> None:
        """Enabling without a prior limit charges at 6 A."""
        fine = await BenderCharger.from_transport(current_transport)
        coarse = await BenderCharger.from_transport(legacy_transport)

        await fine.enable(True)
        await coarse.enable(True)

        assert current_transport.u16(1001) == 60
        assert legacy_transport.u16(1000) == 6

    @pytest.mark.asyncio
    async def test_disable_writes_zero(self, current_transport: FakeRegisterTransport) -> None:
        """Disabling writes zero to the active current register."""
        charger = await BenderCharger.from_transport(current_transport)
        await charger.max_current(10)
        await charger.enable(True)

        await charger.enable(False)

        assert current_transport.writes[-1] == (1001, 1, b"\x00\x00")
        assert charger.last_commanded_current == 100

    @pytest.mark.asyncio
    @pytest.mark.parametrize("current", [0, 1, 2, 3, 4, 5])
    async def test_max_current_below_minimum(
        self, legacy_transport: FakeRegisterTransport, current: int
    ) -> None:
        """Limits below 6 A are rejected without writing."""
        charger = await BenderCharger.from_transport(legacy_transport)

        with pytest.raises(ValidationError, match=f"invalid current {current}"):
            await charger.max_current(current)
        assert legacy_transport.writes == []
        assert charger.last_commanded_current == 6

    @pytest.mark.asyncio
    async def test_max_current_too_large_for_tenths(
        self, current_transport: FakeRegisterTransport
    ) -> None:
        """A limit whose tenths overflow the fine register is rejected up front."""
        charger = await BenderCharger.from_transport(current_transport)

        with pytest.raises(ValidationError, match="invalid current 7000"):
            await charger.max_current(7000)
        assert current_transport.writes == []
        assert charger.last_commanded_current == 60

        await charger.max_current(6553)
        await charger.enable(True)
        assert current_transport.u16(1001) == 65530

    @pytest.mark.asyncio
    async def test_max_current_too_large_for_register(
        self, legacy_transport: FakeRegisterTransport
    ) -> None:
        """Whole amp limits must fit into one register."""
        charger = await BenderCharger.from_transport(legacy_transport)

        with pytest.raises(ValidationError):
            await charger.max_current(0x10000)
        assert legacy_transport.writes == []
        assert charger.last_commanded_current == 6

    @pytest.mark.asyncio
    async def test_failed_write_keeps_cache(
        self, legacy_transport: FakeRegisterTransport
    ) -> None:
        """The cached current only changes after a successful write."""
        charger = await BenderCharger.from_transport(legacy_transport)
        legacy_transport.remove(1000)

        with pytest.raises(TransportWriteError):
            await charger.max_current(16)
        assert charger.last_commanded_current == 6


class TestDiagnostics:
    """Tests for diagnose() and format_diagnostics()."""

    @pytest.mark.asyncio
    async def test_current_controller(self, current_transport: FakeRegisterTransport) -> None:
        """Current firmware includes model and smart vehicle fields."""
        charger = await BenderCharger.from_transport(current_transport)

        diagnostics = await charger.diagnose()

        assert diagnostics == {
            "Legacy": "False",
            "Model": "CC613-2M",
            "Firmware": "5.3",
            "Protocol": "1.2",
            "OCPP Status": "0",
            "Smart Vehicle": "False",
            "EVCCID": "",
            "UserID": "",
            "Current Limit": "0.0",
        }
        assert current_transport.writes == []

    @pytest.mark.asyncio
    async def test_legacy_controller(self, legacy_transport: FakeRegisterTransport) -> None:
        """Legacy firmware skips registers it does not implement."""
        charger = await BenderCharger.from_transport(legacy_transport)

        diagnostics = await charger.diagnose()

        assert list(diagnostics) == [
            "Legacy",
            "Firmware",
            "Protocol",
            "OCPP Status",
            "EVCCID",
            "UserID",
            "Current Limit",
        ]
        assert diagnostics["Legacy"] == "True"
        assert diagnostics["UserID"] == "04A1B2C3D4"

    @pytest.mark.asyncio
    async def test_failed_fields_are_omitted(
        self, bare_transport: FakeRegisterTransport
    ) -> None:
        """A failing register read drops only that field."""
        charger = await BenderCharger.from_transport(bare_transport)
        bare_transport.remove(100, 2)

        diagnostics = await charger.diagnose()

        assert "Firmware" not in diagnostics
        assert "EVCCID" not in diagnostics
        assert "UserID" not in diagnostics
        assert diagnostics["Protocol"] == "1.2"
        assert diagnostics["Current Limit"] == "0"

    def test_format_diagnostics(self) -> None:
        """Each field renders as one tab separated line."""
        text = format_diagnostics({"Legacy": "False", "Firmware": "5.3"})

        assert text == "\tLegacy:\tFalse\n\tFirmware:\t5.3"


class TestComposeChargerClass:
    """Tests for compose_charger_class()."""

    def test_no_features_returns_base(self) -> None:
        """Without optional features the base class is used as is."""
        assert compose_charger_class(ChargerFeatures()) is BenderCharger

    def test_classes_are_cached(self) -> None:
        """Equal feature sets share one composed class."""
        features = ChargerFeatures(layout=LayoutVariant.CURRENT, metering=True)

        first = compose_charger_class(features)
        second = compose_charger_class(ChargerFeatures(metering=True))

        assert first is second
        assert issubclass(first, BenderCharger)
        assert first.__name__ == "BenderChargerMeterPhaseCurrentsMeterEnergy"

    def test_subclass_base(self) -> None:
        """Subclasses of BenderCharger can be used as the base."""

        class CustomCharger(BenderCharger):
            pass

        cls = compose_charger_class(ChargerFeatures(battery=True), base=CustomCharger)

        assert issubclass(cls, CustomCharger)
        assert hasattr(cls, "soc")
        assert not hasattr(cls, "current_power")
