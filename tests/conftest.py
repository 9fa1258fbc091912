"""Pytest configuration and shared fixtures for hostlabels tests."""

import pytest

from hostlabels.facts.base import (
    NetworkInfo,
    NetworkInterface,
    OSInfo,
    StaticFactProvider,
)


@pytest.fixture
def static_provider():
    """
    Provide a fact provider with fixed, known facts.

    Two interfaces: eth0 is primary, eth1 is secondary.
    """
    return StaticFactProvider(
        os_info=OSInfo(name="Ubuntu", version="22.04.3 LTS", hostname="myhost"),
        network=NetworkInfo(
            interfaces=[
                NetworkInterface(
                    name="eth0",
                    mac="02:42:ac:11:00:02",
                    ipv4=["10.0.0.1"],
                    ipv6=["fe80::1"],
                ),
                NetworkInterface(
                    name="eth1",
                    mac="02:42:ac:11:00:03",
                    ipv4=["10.0.0.2"],
                    ipv6=["fe80::2"],
                ),
            ],
            primary_index=0,
        ),
        utc_offset=-5,
    )


@pytest.fixture
def label_file(tmp_path):
    """Create a label file with one visible and one hidden label."""
    path = tmp_path / "labels"
    path.write_text('"a":1\n!"b":2\n')
    return path
