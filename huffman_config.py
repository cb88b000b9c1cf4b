# filename: huffman_config.py

import os

# Sizes are measured on the text as encoded here
TEXT_ENCODING = "utf-8"

TEXT_SUFFIX = ".txt"
COMPRESSED_SUFFIX = ".huff"
DECOMPRESSED_SUFFIX = "_decompressed.txt"

LOG_LEVEL = os.environ.get("HUFFMAN_LOG_LEVEL", "WARNING").upper()
