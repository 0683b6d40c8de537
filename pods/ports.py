from typing import AbstractSet

MIN_PORT = 1
MAX_PORT = 65535


def is_valid_port(value) -> bool:
    try:
        number = float(str(value).strip())
    except ValueError:
        return False
    if number != number or number in (float("inf"), float("-inf")):
        return False
    return number.is_integer() and MIN_PORT <= number <= MAX_PORT


def next_available_port(start_port: int, reserved_ports: AbstractSet[str]) -> str:
    port = start_port
    while str(port) in reserved_ports:
        port += 1
    return str(port)


def canonical_port(value) -> str:
    """``"03000"``, ``"3000.0"`` and ``"3e3"`` all become ``"3000"``."""
    return str(int(float(str(value).strip())))
