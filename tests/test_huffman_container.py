import json
import os
import struct
import sys

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if REPO_ROOT not in sys.path:
	sys.path.insert(0, REPO_ROOT)

from huffman_container import create_container_buffer, parse_container_buffer


def _buffer():
	return create_container_buffer({'a': '1', 'b': '0'}, 5, {'a': 2, 'b': 1}, b"\xc0")


def _with_metadata(metadata, payload=b""):
	raw = json.dumps(metadata).encode("utf-8")
	return struct.pack("<I", len(raw)) + raw + payload


def test_layout():
	buf = _buffer()
	(length,) = struct.unpack_from("<I", buf, 0)
	metadata = json.loads(buf[4:4 + length].decode("utf-8"))
	assert metadata == {"codeMap": {'a': '1', 'b': '0'}, "paddingBits": 5, "frequencyMap": {'a': 2, 'b': 1}}
	assert buf[4 + length:] == b"\xc0"


def test_parse_roundtrip():
	parsed = parse_container_buffer(_buffer())
	assert parsed is not None
	assert parsed.compressed_data == b"\xc0"
	assert parsed.code_map == {'a': '1', 'b': '0'}
	assert parsed.padding_bits == 5
	assert parsed.frequency_map == {'a': 2, 'b': 1}
	assert list(parsed.frequency_map) == ['a', 'b']


def test_parse_accepts_bytearray_and_non_ascii_symbols():
	buf = create_container_buffer({'€': '0', '\n': '1'}, 6, {'€': 1, '\n': 1}, b"\x40")
	parsed = parse_container_buffer(bytearray(buf))
	assert parsed.frequency_map == {'€': 1, '\n': 1}


def test_empty_tables():
	parsed = parse_container_buffer(create_container_buffer({}, 0, {}, b""))
	assert parsed.code_map == {}
	assert parsed.compressed_data == b""


def test_rejects_short_header():
	buf = _buffer()
	for n in range(4):
		assert parse_container_buffer(buf[:n]) is None


def test_rejects_truncated_metadata():
	buf = _buffer()
	(length,) = struct.unpack_from("<I", buf, 0)
	assert parse_container_buffer(buf[:4 + length - 1]) is None
	assert parse_container_buffer(buf[:4 + length]) is not None


def test_rejects_oversized_length():
	buf = bytearray(_buffer())
	buf[0:4] = struct.pack("<I", len(buf))
	assert parse_container_buffer(bytes(buf)) is None


def test_rejects_bad_text():
	assert parse_container_buffer(struct.pack("<I", 2) + b"\xff\xfe") is None
	assert parse_container_buffer(struct.pack("<I", 3) + b"{x}") is None
	assert parse_container_buffer(_with_metadata([1, 2, 3])) is None


def test_rejects_bad_fields():
	good = {"codeMap": {'a': '0'}, "paddingBits": 4, "frequencyMap": {'a': 4}}
	assert parse_container_buffer(_with_metadata(good, b"\x00")) is not None

	bad = [
		dict(good, paddingBits=8),
		dict(good, paddingBits=-1),
		dict(good, paddingBits="4"),
		dict(good, paddingBits=True),
		dict(good, codeMap={'a': '02'}),
		dict(good, codeMap={'a': ''}),
		dict(good, codeMap=['a']),
		dict(good, frequencyMap={'a': 0}),
		dict(good, frequencyMap={'a': 1.5}),
		dict(good, frequencyMap={'b': 4}),
		{"codeMap": {'a': '0'}, "paddingBits": 4},
	]
	for metadata in bad:
		assert parse_container_buffer(_with_metadata(metadata, b"\x00")) is None


def test_rejects_deeply_nested_metadata():
	raw = b"[" * 200000 + b"]" * 200000
	assert parse_container_buffer(struct.pack("<I", len(raw)) + raw) is None


def test_lone_surrogate_symbols_survive():
	buf = create_container_buffer({'\ud800': '0', 'a': '1'}, 6, {'\ud800': 1, 'a': 1}, b"\x40")
	parsed = parse_container_buffer(buf)
	assert parsed.code_map == {'\ud800': '0', 'a': '1'}
	assert parsed.frequency_map == {'\ud800': 1, 'a': 1}
