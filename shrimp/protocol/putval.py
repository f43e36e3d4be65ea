"""
collectd plain text protocol emitter.

Renders measurements as PUTVAL lines, one per value, on the stream
read by collectd's Exec plugin.

cf: https://collectd.org/wiki/index.php/Plain_text_protocol
"""
import logging
import sys
from decimal import Decimal
from typing import Optional, TextIO

logger = logging.getLogger(__name__)


def quote(text: str) -> str:
    """Wrap text in double quotes, escaping backslashes and quotes."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_prefix(hostname: str, plugin_name: str, instance: str, type_name: str) -> str:
    """
    Build the invariant part of every line for one plugin instance.

    Args:
        hostname: Host name of the identifier.
        plugin_name: Plugin display name.
        instance: Plugin instance name.
        type_name: collectd type.

    Returns:
        The ``PUTVAL "<host>/<plugin>-<instance>/<type>"`` prefix.
    """
    identifier = f"{hostname}/{plugin_name}-{instance}/{type_name}"
    return f"PUTVAL {quote(identifier)}"


def format_number(value: float) -> str:
    """
    Render a number as decimal text.

    Integral values lose their fractional part (``1.0`` gives ``1``),
    everything else uses the shortest text that round-trips.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value)


def format_scaled(raw: int, factor: float) -> str:
    """
    Multiply a raw integer by a factor and render the product.

    The product is computed in decimal from the factor's shortest text,
    so that ``32128 * 0.001`` renders ``32.128``.
    """
    product = Decimal(raw) * Decimal(repr(float(factor)))
    if product == product.to_integral_value():
        return str(int(product))
    return format(product.normalize(), "f")


class PutvalEmitter:
    """
    Writes PUTVAL lines to an output stream.

    The stream is standard output unless another one is given.
    Lines are not buffered beyond what the stream itself does;
    the scheduler flushes once per tick.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream
        self.lines_written = 0

    @property
    def stream(self) -> TextIO:
        # resolved lazily so that a replaced sys.stdout is honored
        return self._stream if self._stream is not None else sys.stdout

    @staticmethod
    def render(
        prefix: str,
        interval: str,
        time: int,
        value: str,
        sub_identifier: Optional[str] = None,
    ) -> str:
        """
        Render one measurement as one line, without the newline.

        Args:
            prefix: Precomputed ``PUTVAL "<identifier>"`` prefix.
            interval: Interval text.
            time: Unix time of the measurement in seconds.
            value: Rendered value.
            sub_identifier: Optional type instance appended to the identifier.

        Returns:
            The protocol line.
        """
        if sub_identifier is not None:
            return f"{prefix}-{quote(sub_identifier)} interval={interval} {time}:{value}"
        return f"{prefix} interval={interval} {time}:{value}"

    def emit(
        self,
        prefix: str,
        interval: str,
        time: int,
        value: str,
        sub_identifier: Optional[str] = None,
    ) -> None:
        """Write one measurement line to the stream."""
        line = self.render(prefix, interval, time, value, sub_identifier)
        self.stream.write(line + "\n")
        self.lines_written += 1

    def flush(self) -> None:
        """Flush the underlying stream."""
        self.stream.flush()
