# filename: huffman_bits.py

import bitarray


def pack_bits(bit_string):
    """Pack a '0'/'1' string MSB-first into bytes.

    Returns (payload, padding_bits) where padding_bits is the number of
    zero bits appended to complete the final byte.
    """
    bits = bitarray.bitarray(bit_string, endian="big")
    padding = bits.fill()
    return bits.tobytes(), padding


def unpack_bits(payload, padding_bits):
    bits = bitarray.bitarray(endian="big")
    bits.frombytes(bytes(payload))

    if not 0 <= padding_bits <= 7:
        raise ValueError(f"padding bits must be in 0..7, got {padding_bits}")
    if padding_bits > len(bits):
        raise ValueError("padding exceeds payload length")

    # Padding only completes the last byte; it carries no symbols
    if padding_bits:
        del bits[-padding_bits:]
    return bits


def encode_symbols(symbols, code_map):
    encoded_str = "".join([code_map[char] for char in symbols])
    return pack_bits(encoded_str)
