"""Tests for the charger driver registry."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from pybendercc.exceptions import ConfigurationError, RegistryError
from pybendercc.registry import DriverRegistry, create_bender_from_config, register_bender
from pybendercc.transports.exceptions import TransportReadError


class TestDriverRegistry:
    """Tests for DriverRegistry."""

    def test_empty_on_creation(self) -> None:
        """Nothing is registered implicitly."""
        assert DriverRegistry().types() == []

    def test_register_bender(self) -> None:
        """The Bender driver registers under its type name."""
        registry = DriverRegistry()
        register_bender(registry)

        assert registry.types() == ["bender"]
        assert registry.get("Bender") is create_bender_from_config

    def test_duplicate_rejected(self) -> None:
        """A type name can only be registered once."""
        registry = DriverRegistry()
        register_bender(registry)

        with pytest.raises(RegistryError, match="already registered"):
            register_bender(registry)

    def test_unknown_type(self) -> None:
        """Unknown type names raise RegistryError."""
        with pytest.raises(RegistryError, match="Unknown charger type 'abl'"):
            DriverRegistry().get("abl")

    @pytest.mark.asyncio
    async def test_create_dispatches_to_factory(self) -> None:
        """create() passes the config mapping to the factory."""
        charger = MagicMock()
        factory = AsyncMock(return_value=charger)
        registry = DriverRegistry()
        registry.add("test", factory)

        assert await registry.create("TEST", {"uri": "x"}) is charger
        factory.assert_awaited_once_with({"uri": "x"})


class TestCreateBenderFromConfig:
    """Tests for create_bender_from_config()."""

    @pytest.mark.asyncio
    async def test_missing_uri(self) -> None:
        """uri is required."""
        with pytest.raises(ConfigurationError, match="uri is required"):
            await create_bender_from_config({"id": 255})

    @pytest.mark.asyncio
    async def test_unknown_key(self) -> None:
        """Unrecognised keys are rejected."""
        with pytest.raises(ConfigurationError, match="Unknown config keys: serial"):
            await create_bender_from_config({"uri": "192.168.1.50", "serial": "x"})

    @pytest.mark.asyncio
    async def test_invalid_id(self) -> None:
        """Non-numeric unit ids are rejected."""
        with pytest.raises(ConfigurationError):
            await create_bender_from_config({"uri": "192.168.1.50", "id": "abc"})

    @pytest.mark.asyncio
    async def test_connects_and_probes(self) -> None:
        """A valid config connects the transport and probes the charger."""
        charger = MagicMock()

        with (
            patch(
                "pybendercc.registry.create_transport_from_config"
            ) as mock_create_transport,
            patch(
                "pybendercc.registry.BenderCharger.from_transport",
                new=AsyncMock(return_value=charger),
            ) as mock_from_transport,
        ):
            transport = MagicMock()
            transport.connect = AsyncMock()
            mock_create_transport.return_value = transport

            result = await create_bender_from_config(
                {"URI": "192.168.1.50:5020", "Id": 1, "timeout": 2}
            )

            assert result is charger
            config = mock_create_transport.call_args.args[0]
            assert config.host == "192.168.1.50"
            assert config.port == 5020
            assert config.unit_id == 1
            assert config.timeout == 2.0
            transport.connect.assert_awaited_once()
            mock_from_transport.assert_awaited_once_with(transport)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [asyncio.CancelledError(), TransportReadError("read failed"), RuntimeError("bug")],
    )
    async def test_failed_setup_closes_transport(self, error: BaseException) -> None:
        """The connected transport is closed when charger setup fails."""
        with (
            patch(
                "pybendercc.registry.create_transport_from_config"
            ) as mock_create_transport,
            patch(
                "pybendercc.registry.BenderCharger.from_transport",
                new=AsyncMock(side_effect=error),
            ),
        ):
            transport = MagicMock()
            transport.connect = AsyncMock()
            transport.disconnect = AsyncMock()
            mock_create_transport.return_value = transport

            with pytest.raises(type(error)):
                await create_bender_from_config({"uri": "192.168.1.50"})

            transport.disconnect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_successful_setup_keeps_transport_open(self) -> None:
        """The transport stays connected for the returned charger."""
        with (
            patch(
                "pybendercc.registry.create_transport_from_config"
            ) as mock_create_transport,
            patch(
                "pybendercc.registry.BenderCharger.from_transport",
                new=AsyncMock(return_value=MagicMock()),
            ),
        ):
            transport = MagicMock()
            transport.connect = AsyncMock()
            transport.disconnect = AsyncMock()
            mock_create_transport.return_value = transport

            await create_bender_from_config({"uri": "192.168.1.50"})

            transport.disconnect.assert_not_awaited()
