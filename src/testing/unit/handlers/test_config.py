import pytest

from bulkstream.errors import ConfigurationError
from bulkstream.handlers import DEFAULT_HIGH_WATER_MARK, WriterConfig


def test_defaults():
    config = WriterConfig()
    assert config.high_water_mark == DEFAULT_HIGH_WATER_MARK == 16
    assert config.timeout is None


@pytest.mark.parametrize("value", [0, -1, 1.5, "16", True])
def test_invalid_high_water_mark(value):
    with pytest.raises(ConfigurationError, match="high_water_mark"):
        WriterConfig(high_water_mark=value)


@pytest.mark.parametrize("value", [0, -0.5, "1", False])
def test_invalid_timeout(value):
    with pytest.raises(ConfigurationError, match="timeout"):
        WriterConfig(timeout=value)


def test_valid_timeout():
    assert WriterConfig(timeout=0.25).timeout == 0.25
    assert WriterConfig(timeout=2).timeout == 2
