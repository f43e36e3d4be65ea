"""
TCP source adapter.

Connects to a ``host:port`` target, optionally sends a query, and reads
back either a single byte or exactly as many bytes as the expected
response holds.
"""
import asyncio
import logging
from enum import Enum
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


class ReadMode(str, Enum):
    """How a TCP probe decides that the peer answered."""
    ONE_BYTE = "one_byte"
    EXPECTED = "expected"


def parse_target(target: str) -> Tuple[str, int]:
    """
    Split a ``host:port`` target.

    IPv6 addresses must be bracketed: ``[::1]:23``.

    Raises:
        ValueError: If the target has no valid port.
    """
    host, sep, port = target.rpartition(":")
    if not sep or not host:
        raise ValueError(f"invalid target '{target}', expected host:port")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]

    port_number = int(port)
    if not 0 < port_number < 65536:
        raise ValueError(f"invalid port in target '{target}'")

    return host, port_number


async def _close(writer: asyncio.StreamWriter) -> None:
    writer.close()
    try:
        await writer.wait_closed()
    except (OSError, asyncio.IncompleteReadError):
        pass


async def query_tcp(
    target: str,
    timeout: Optional[float],
    read_mode: ReadMode,
    query: Optional[str] = None,
    expected: Optional[str] = None,
) -> bool:
    """
    Probe a TCP peer.

    Args:
        target: ``host:port`` to connect to.
        timeout: Timeout applied to the connect, the write and the read,
                 None for no timeout.
        read_mode: Whether to read one byte or the expected response.
        query: Text sent right after connecting, if any.
        expected: Response compared in EXPECTED mode.

    Returns:
        True if a byte was read (ONE_BYTE) or the response matched
        (EXPECTED), False on a mismatch.

    Raises:
        OSError: If connecting, writing or reading fails or times out.
        asyncio.IncompleteReadError: If the peer closes before answering.
        UnicodeDecodeError: If the response is not valid UTF-8.
        ValueError: If the target is malformed.
    """
    host, port = parse_target(target)
    logger.debug(f"Connecting to {host}:{port} (timeout={timeout})")

    reader, writer = await asyncio.wait_for(
        asyncio.open_connection(host, port),
        timeout=timeout,
    )

    try:
        if query:
            writer.write(query.encode("utf-8"))
            await asyncio.wait_for(writer.drain(), timeout=timeout)

        if read_mode == ReadMode.EXPECTED:
            expected_bytes = (expected or "").encode("utf-8")
            data = await asyncio.wait_for(
                reader.readexactly(len(expected_bytes)),
                timeout=timeout,
            )
            return data.decode("utf-8") == expected

        await asyncio.wait_for(reader.readexactly(1), timeout=timeout)
        return True
    finally:
        await _close(writer)
