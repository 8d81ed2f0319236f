from datetime import datetime, timedelta, timezone

import pytest

from tonic.logger import (
    BLUE,
    CYAN,
    GREEN,
    MAGENTA,
    RED,
    RESET,
    WHITE,
    YELLOW,
    ColorMode,
    LogFormatterParams,
    console_color_mode,
    default_log_formatter,
    disable_console_color,
    force_console_color,
    format_duration,
    set_console_color_mode,
)


@pytest.fixture(autouse=True)
def _reset_color_mode():
    set_console_color_mode(ColorMode.AUTO)
    yield
    set_console_color_mode(ColorMode.AUTO)


TIMESTAMP = datetime(2018, 12, 7, 9, 11, 42, tzinfo=timezone.utc)


def _params(latency, is_term, **extra):
    return LogFormatterParams(
        timestamp=TIMESTAMP,
        status_code=200,
        latency=latency,
        client_ip="20.20.20.20",
        method="GET",
        path="/",
        error_message="",
        is_term=is_term,
        **extra,
    )


def test_default_log_formatter_plain():
    assert (
        default_log_formatter(_params(timedelta(seconds=5), False))
        == '[TONIC] 2018/12/07 - 09:11:42 | 200 |            5s |     20.20.20.20 | GET      "/"\n'
    )


def test_default_log_formatter_plain_long_duration():
    assert (
        default_log_formatter(_params(timedelta(milliseconds=9876543210), False))
        == '[TONIC] 2018/12/07 - 09:11:42 | 200 |    2743h29m3s |     20.20.20.20 | GET      "/"\n'
    )


def test_default_log_formatter_terminal():
    assert (
        default_log_formatter(_params(timedelta(seconds=5), True))
        == "[TONIC] 2018/12/07 - 09:11:42 |\x1b[97;42m 200 \x1b[0m|            5s |"
        '     20.20.20.20 |\x1b[97;44m GET     \x1b[0m "/"\n'
    )


def test_default_log_formatter_terminal_long_duration():
    assert (
        default_log_formatter(_params(timedelta(milliseconds=9876543210), True))
        == "[TONIC] 2018/12/07 - 09:11:42 |\x1b[97;42m 200 \x1b[0m|    2743h29m3s |"
        '     20.20.20.20 |\x1b[97;44m GET     \x1b[0m "/"\n'
    )


def test_default_log_formatter_error_and_quoting():
    params = _params(timedelta(milliseconds=1, microseconds=500), False)
    params.path = '/a"b?x=1'
    params.error_message = "boom"
    assert default_log_formatter(params) == (
        '[TONIC] 2018/12/07 - 09:11:42 | 200 |         1.5ms |     20.20.20.20 | GET      "/a\\"b?x=1"\nboom'
    )


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0s"),
        (timedelta(seconds=5), "5s"),
        (timedelta(milliseconds=1, microseconds=500), "1.5ms"),
        (0.0000015, "1.5µs"),
        (0.000000123, "123ns"),
        (timedelta(seconds=90), "1m30s"),
        (timedelta(hours=1, minutes=1, seconds=1, milliseconds=500), "1h1m1.5s"),
        (timedelta(seconds=9876543), "2743h29m3s"),
        (-2, "-2s"),
    ],
)
def test_format_duration(value, expected):
    assert format_duration(value) == expected


@pytest.mark.parametrize(
    "method, color",
    [
        ("GET", BLUE),
        ("POST", CYAN),
        ("PUT", YELLOW),
        ("DELETE", RED),
        ("PATCH", GREEN),
        ("HEAD", MAGENTA),
        ("OPTIONS", WHITE),
        ("TRACE", RESET),
    ],
)
def test_color_for_method(method, color):
    assert LogFormatterParams(method=method).method_color() == color


@pytest.mark.parametrize(
    "code, color",
    [(100, WHITE), (200, GREEN), (301, WHITE), (404, YELLOW), (2, RED), (500, RED)],
)
def test_color_for_status(code, color):
    assert LogFormatterParams(status_code=code).status_code_color() == color


def test_reset_color():
    assert LogFormatterParams().reset_color() == bytes([27, 91, 48, 109]).decode()


def test_is_output_color_on_terminal():
    p = LogFormatterParams(is_term=True)
    set_console_color_mode(ColorMode.AUTO)
    assert p.is_output_color() is True
    force_console_color()
    assert p.is_output_color() is True
    disable_console_color()
    assert p.is_output_color() is False


def test_is_output_color_off_terminal():
    p = LogFormatterParams(is_term=False)
    set_console_color_mode(ColorMode.AUTO)
    assert p.is_output_color() is False
    force_console_color()
    assert p.is_output_color() is True
    disable_console_color()
    assert p.is_output_color() is False


def test_disable_console_color():
    assert console_color_mode() is ColorMode.AUTO
    disable_console_color()
    assert console_color_mode() is ColorMode.DISABLE


def test_force_console_color():
    assert console_color_mode() is ColorMode.AUTO
    force_console_color()
    assert console_color_mode() is ColorMode.FORCE


def test_set_console_color_mode_rejects_unknown():
    with pytest.raises(ValueError):
        set_console_color_mode("sometimes")