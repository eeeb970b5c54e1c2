import io
import re

import pytest

from svcgateway import logs
from svcgateway.logs import LocalLogger, LoggerType


@pytest.mark.parametrize(
    "method, level",
    [
        (LocalLogger.debug, "DEBUG"),
        (LocalLogger.info, "INFO"),
        (LocalLogger.warn, "WARN"),
        (LocalLogger.error, "ERROR"),
    ],
)
def test_levels_are_written(method, level):
    stream = io.StringIO()
    logger = LocalLogger("src", "host", stream)
    method(logger, "hello")
    line = stream.getvalue()
    assert re.fullmatch(r"\[\d\d:\d\d:\d\d\]", line[:10])
    assert line[10:] == f" [{level}] [src] [host] hello\n"


def test_log_with_level_writes_to_stderr_by_default(capsys):
    LocalLogger("gateway", "127.0.0.1").log_with_level("msg", "INFO")
    err = capsys.readouterr().err
    assert err.endswith("[INFO] [gateway] [127.0.0.1] msg\n")


def test_init_replaces_global_logger():
    installed = logs.init(LoggerType.LOCAL, "svc-a", "host-a")
    assert logs.get_logger() is installed
    assert logs.get_logger().source == "svc-a"
    assert logs.get_logger().hostname == "host-a"


def test_multiple_lines_are_separate():
    stream = io.StringIO()
    logger = LocalLogger("s", "h", stream)
    logger.info("one")
    logger.warn("two")
    lines = stream.getvalue().splitlines()
    assert len(lines) == 2
    assert lines[0].endswith("one")
    assert lines[1].endswith("two")