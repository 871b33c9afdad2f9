"""Tests for user intent conversion and light commands."""

from datetime import timedelta

import pytest

from lightctl import ResourceClient, Root, commands


class TestBrightness:
    """Tests for brightness percent <-> dimmer byte."""

    @pytest.mark.parametrize(
        ("level", "dimmer"),
        [(0, 0), (1, 3), (10, 26), (30, 77), (50, 128), (99, 252), (100, 255)],
    )
    def test_percent_to_dimmer(self, level, dimmer):
        assert commands.percent_to_dimmer(level) == dimmer

    @pytest.mark.parametrize(("level", "clamped"), [(-5, 0), (-100, 0), (150, 100)])
    def test_out_of_range_is_clamped(self, level, clamped):
        assert commands.percent_to_dimmer(level) == commands.percent_to_dimmer(clamped)

    def test_nan_rejected(self):
        with pytest.raises(ValueError):
            commands.percent_to_dimmer(float("nan"))

    def test_every_level_in_range(self):
        for level in range(101):
            dimmer = commands.percent_to_dimmer(level)
            assert 0 <= dimmer <= 255
            assert abs(dimmer - level * 255 / 100) <= 0.5


class TestWarmth:
    """Tests for warmth percent <-> mireds."""

    def test_endpoints(self):
        assert commands.warmth_to_mireds(0) == 454
        assert commands.warmth_to_mireds(100) == 250

    def test_midpoint(self):
        assert commands.warmth_to_mireds(50) == 352

    def test_every_warmth_in_range(self):
        for warmth in range(101):
            assert 250 <= commands.warmth_to_mireds(warmth) <= 454

    @pytest.mark.parametrize(("warmth", "mireds"), [(-20, 454), (250, 250)])
    def test_out_of_range_is_clamped(self, warmth, mireds):
        assert commands.warmth_to_mireds(warmth) == mireds


class TestLightCommands:
    """Tests for intent -> single write."""

    @pytest.mark.asyncio
    async def test_set_state(self, gateway):
        await commands.set_state(ResourceClient(gateway), Root.DEVICES, 65537, True)
        assert gateway.written() == {"5850": 1}

    @pytest.mark.asyncio
    async def test_set_level(self, gateway):
        await commands.set_level(
            ResourceClient(gateway),
            Root.GROUPS,
            131073,
            50,
            timedelta(milliseconds=450),
        )

        assert gateway.paths == ["/15004/131073"]
        assert gateway.written() == {"5851": 128, "5712": 4}

    @pytest.mark.asyncio
    async def test_set_level_clamped(self, gateway):
        await commands.set_level(ResourceClient(gateway), Root.DEVICES, 65537, 150)
        assert gateway.written() == {"5851": 255, "5712": 0}

    @pytest.mark.asyncio
    async def test_set_warmth(self, gateway):
        await commands.set_warmth(
            ResourceClient(gateway), Root.DEVICES, 65537, 0, timedelta(seconds=1)
        )
        assert gateway.written() == {"5711": 454, "5712": 10}

    @pytest.mark.asyncio
    async def test_each_intent_is_one_write(self, gateway):
        client = ResourceClient(gateway)
        await commands.set_level(client, Root.GROUPS, 131073, 40)
        await commands.set_warmth(client, Root.GROUPS, 131073, 60)

        assert [m for m, _, _ in gateway.requests] == ["PUT", "PUT"]
        assert "5711" not in gateway.written(0)
        assert "5851" not in gateway.written(1)
