"""Order-preserving variable-length integer encoding.

A value takes n bytes (1 <= n <= 9). The first byte starts with n-1 one bits followed by a
zero bit (no zero bit when n is 9), and the remaining bits hold the value big-endian. Shorter
encodings always sort before longer ones, so comparing encoded bytes compares the values,
which keeps LevelDB keys built from them in numeric order.
"""

MAX_VARINT = (1 << 63) - 1


def encode_varint(value: int) -> bytes:
    """Encode a value from 0 to 2^63-1.

    Raises:
        ValueError: If value is negative or exceeds 2^63-1
    """
    if value < 0:
        raise ValueError(f"Cannot encode negative value: {value}")
    if value > MAX_VARINT:
        raise ValueError(f"Value {value} exceeds maximum (2^63-1)")

    byte_count = next(n for n in range(1, 10) if value < (1 << (7 * n)))
    prefix = (0xFF << (9 - byte_count)) & 0xFF
    return ((prefix << (8 * (byte_count - 1))) | value).to_bytes(byte_count, 'big')


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Decode a varint starting at offset.

    Returns:
        Tuple of (decoded_value, bytes_consumed)

    Raises:
        ValueError: If data is invalid or insufficient
    """
    if offset >= len(data):
        raise ValueError("Offset exceeds data length")

    first_byte = data[offset]
    leading_ones = 0
    while leading_ones < 8 and first_byte & (0x80 >> leading_ones):
        leading_ones += 1
    byte_count = leading_ones + 1

    if offset + byte_count > len(data):
        raise ValueError(f"Insufficient data: need {byte_count} bytes, have {len(data) - offset}")

    raw = int.from_bytes(data[offset:offset + byte_count], 'big')
    return raw & ((1 << (7 * byte_count)) - 1), byte_count
