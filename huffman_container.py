# filename: huffman_container.py
#
# Layout: [u32 LE metadata length][UTF-8 JSON metadata][payload bytes]

import json
import struct
from dataclasses import dataclass

from loguru import logger

HEADER = struct.Struct("<I")


@dataclass
class ParsedContainer:
    compressed_data: bytes
    code_map: dict
    padding_bits: int
    frequency_map: dict


class ContainerFormatError(ValueError):
    pass


def create_container_buffer(code_map, padding_bits, frequency_map, payload):
    metadata = {
        "codeMap": code_map,
        "paddingBits": padding_bits,
        "frequencyMap": frequency_map,
    }
    # ASCII escapes keep lone surrogates encodable
    metadata_bytes = json.dumps(metadata).encode("utf-8")
    return HEADER.pack(len(metadata_bytes)) + metadata_bytes + bytes(payload)


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_metadata(metadata):
    if not isinstance(metadata, dict):
        raise ContainerFormatError("metadata is not an object")

    code_map = metadata.get("codeMap")
    padding_bits = metadata.get("paddingBits")
    frequency_map = metadata.get("frequencyMap")

    if not isinstance(code_map, dict):
        raise ContainerFormatError("codeMap missing or not an object")
    for code in code_map.values():
        if not isinstance(code, str) or not code or set(code) - {"0", "1"}:
            raise ContainerFormatError(f"invalid code {code!r}")

    if not _is_int(padding_bits) or not 0 <= padding_bits <= 7:
        raise ContainerFormatError(f"invalid paddingBits {padding_bits!r}")

    if not isinstance(frequency_map, dict):
        raise ContainerFormatError("frequencyMap missing or not an object")
    for freq in frequency_map.values():
        if not _is_int(freq) or freq <= 0:
            raise ContainerFormatError(f"invalid frequency {freq!r}")

    if code_map.keys() != frequency_map.keys():
        raise ContainerFormatError("codeMap and frequencyMap symbols differ")

    return code_map, padding_bits, frequency_map


def read_container(data):
    """Split a container buffer, raising ContainerFormatError on bad input."""
    data = bytes(data)
    if len(data) < HEADER.size:
        raise ContainerFormatError("buffer shorter than header")

    (metadata_length,) = HEADER.unpack_from(data, 0)
    end = HEADER.size + metadata_length
    if end > len(data):
        raise ContainerFormatError(
            f"metadata length {metadata_length} exceeds buffer size {len(data)}"
        )

    try:
        metadata = json.loads(data[HEADER.size:end].decode("utf-8"))
    except (ValueError, RecursionError) as e:
        # ValueError covers UnicodeDecodeError and JSONDecodeError; deep
        # nesting exhausts the decoder's recursion instead
        raise ContainerFormatError(f"unreadable metadata: {e}") from e

    code_map, padding_bits, frequency_map = _validate_metadata(metadata)
    return ParsedContainer(
        compressed_data=data[end:],
        code_map=code_map,
        padding_bits=padding_bits,
        frequency_map=frequency_map,
    )


def parse_container_buffer(data):
    try:
        return read_container(data)
    except ContainerFormatError as e:
        logger.warning("Rejected container buffer: {}", e)
        return None
