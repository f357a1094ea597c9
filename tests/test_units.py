import pytest

from blockverse_deploy.units import format_ether


class TestFormatEther:
    def test_one_ether(self):
        assert format_ether(1000000000000000000) == "1.0"

    def test_repeated_calls_render_the_same(self):
        results = {format_ether(10 ** 18) for _ in range(5)}
        assert results == {"1.0"}

    @pytest.mark.parametrize(
        "wei, expected",
        [
            (0, "0.0"),
            (1, "0.000000000000000001"),
            (1500000000000000000, "1.5"),
            (123456789000000000000, "123.456789"),
            (-2 * 10 ** 18, "-2.0"),
        ],
    )
    def test_canonical_decimal_form(self, wei, expected):
        assert format_ether(wei) == expected

    def test_custom_decimals(self):
        assert format_ether(150, decimals=2) == "1.5"
        assert format_ether(7, decimals=0) == "7.0"
