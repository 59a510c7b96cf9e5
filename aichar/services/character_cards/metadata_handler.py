"""
PNG Metadata Handler
===================

Reads and writes the base64 text chunk that turns a PNG into a character card.

Extraction is two-tier: Pillow's chunk reader first, then a raw byte scan
for cards written by producers whose chunk layout Pillow rejects.
"""

import base64
import binascii
import logging
import zlib
from io import BytesIO
from typing import Iterator, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .errors import (
    Base64DecodeError,
    ChunkNotFoundError,
    PngDecodeError,
    PngEncodeError,
    Utf8DecodeError,
)

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

_TEXT_CHUNK_TYPES = (b"tEXt", b"zTXt", b"iTXt")

# DecompressionBombError derives from Exception, not OSError
_DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    SyntaxError,
    ValueError,
)


def _build_chunk(chunk_type: bytes, chunk_data: bytes) -> bytes:
    length = len(chunk_data).to_bytes(4, "big")
    crc = zlib.crc32(chunk_type + chunk_data) & 0xFFFFFFFF
    return length + chunk_type + chunk_data + crc.to_bytes(4, "big")


def _iter_chunks(png_data: bytes) -> Iterator[Tuple[bytes, bytes, bytes]]:
    """Yield (type, data, raw chunk bytes) after the signature; ValueError if truncated."""
    pos = len(PNG_SIGNATURE)
    while pos < len(png_data):
        if pos + 8 > len(png_data):
            raise ValueError(f"truncated chunk header at offset {pos}")
        length = int.from_bytes(png_data[pos:pos + 4], "big")
        chunk_type = png_data[pos + 4:pos + 8]
        end = pos + 12 + length
        if end > len(png_data):
            raise ValueError(f"truncated {chunk_type!r} chunk at offset {pos}")
        yield chunk_type, png_data[pos + 8:pos + 8 + length], png_data[pos:end]
        pos = end


def _chunk_keyword(chunk_data: bytes) -> str:
    return chunk_data.split(b"\x00", 1)[0].decode("latin-1")


class PNGMetadataHandler:
    """Handle PNG text chunk operations for character card payloads."""

    @staticmethod
    def is_png_data(png_data: bytes) -> bool:
        return png_data[:len(PNG_SIGNATURE)] == PNG_SIGNATURE

    @staticmethod
    def read_text_chunk(png_data: bytes, keyword: str = "chara") -> Optional[str]:
        """
        Structured read: text chunk value for keyword via Pillow.

        Args:
            png_data: PNG file data as bytes
            keyword: Text chunk keyword (case-insensitive)

        Returns:
            Chunk text if found, None if absent or if Pillow can't decode the stream
        """
        try:
            with Image.open(BytesIO(png_data)) as image:
                if image.format != "PNG":
                    logger.debug(f"Not a PNG image (format: {image.format})")
                    return None
                # Reading .text loads the image so chunks after IDAT are seen too
                text_chunks = image.text
        except _DECODE_ERRORS as e:
            logger.warning(f"PNG decoder could not read text chunks: {e}")
            return None

        for key, value in text_chunks.items():
            if key.lower() == keyword.lower():
                logger.debug(f"Found text chunk with keyword '{key}'")
                return value

        logger.debug(f"Text chunk with keyword '{keyword}' not found by PNG decoder")
        return None

    @staticmethod
    def scan_text_chunk(png_data: bytes, keyword: str = "chara") -> Optional[str]:
        """
        Fallback read: locate the payload by scanning raw bytes.

        Takes everything between 'tEXt<keyword>\\0' and the 8 bytes before the
        last 'IEND' (the text chunk's CRC and IEND's length field). This is
        best-effort: it only works when the keyword chunk is the last one
        before IEND, and is not meant for adversarial input.

        Returns:
            Payload text, or None when either marker is missing
        """
        marker = b"tEXt" + keyword.encode("latin-1") + b"\x00"
        start = png_data.find(marker)
        if start == -1:
            logger.debug(f"Byte scan: no 'tEXt{keyword}' marker")
            return None

        iend = png_data.rfind(b"IEND")
        if iend == -1:
            logger.debug("Byte scan: no 'IEND' marker")
            return None

        begin = start + len(marker)
        end = iend - 8
        if end <= begin:
            logger.debug(f"Byte scan: empty payload range ({begin}..{end})")
            return None

        return png_data[begin:end].decode("latin-1")

    @classmethod
    def extract_payload(
        cls,
        png_data: bytes,
        keyword: str = "chara",
        fallback_scan: bool = True,
        path: Optional[str] = None
    ) -> str:
        """
        Find the card payload, trying the PNG decoder before the byte scan.

        Args:
            png_data: Card data as bytes (need not be a valid PNG)
            keyword: Text chunk keyword
            fallback_scan: Allow the raw byte scan
            path: Source file, for error messages

        Returns:
            Raw chunk text (still base64-encoded)

        Raises:
            ChunkNotFoundError: Neither tier found a payload
        """
        payload = cls.read_text_chunk(png_data, keyword)
        if payload:
            return payload

        if fallback_scan:
            payload = cls.scan_text_chunk(png_data, keyword)
            if payload:
                logger.info(f"Recovered '{keyword}' payload with raw byte scan")
                return payload

        raise ChunkNotFoundError(keyword, path)

    @classmethod
    def write_text_chunk(
        cls,
        png_data: bytes,
        keyword: str,
        text: str,
        path: Optional[str] = None
    ) -> bytes:
        """
        Insert a keyword text chunk just before IEND.

        The source must decode with Pillow, but the output is spliced from the
        original chunk stream: IHDR, palette and IDAT bytes are kept as-is.
        Any existing tEXt/zTXt/iTXt chunk with the same keyword is dropped.

        Args:
            png_data: Original PNG file data as bytes
            keyword: Text chunk keyword (e.g. 'chara')
            text: Chunk text (latin-1, normally base64)
            path: Source file, for error messages

        Returns:
            New PNG data

        Raises:
            PngDecodeError: Source is not a decodable PNG
            PngEncodeError: Keyword or text cannot be stored in a tEXt chunk
        """
        try:
            with Image.open(BytesIO(png_data)) as image:
                image_format = image.format
                image.load()
        except _DECODE_ERRORS as e:
            raise PngDecodeError(f"Failed to decode PNG image: {e}", path) from e

        if image_format != "PNG" or not cls.is_png_data(png_data):
            raise PngDecodeError(f"Card image must be a PNG, got {image_format}", path)

        try:
            chunk = _build_chunk(b"tEXt", keyword.encode("latin-1") + b"\x00" + text.encode("latin-1"))
        except UnicodeEncodeError as e:
            raise PngEncodeError(f"Text chunk must be latin-1: {e}", path) from e

        parts = [PNG_SIGNATURE]
        try:
            for chunk_type, chunk_data, raw in _iter_chunks(png_data):
                if chunk_type == b"IEND":
                    parts.append(chunk)
                    parts.append(raw)
                    break
                if chunk_type in _TEXT_CHUNK_TYPES and _chunk_keyword(chunk_data).lower() == keyword.lower():
                    logger.debug(f"Dropping existing {chunk_type.decode('ascii')} chunk '{keyword}'")
                    continue
                parts.append(raw)
            else:
                raise ValueError("missing IEND chunk")
        except ValueError as e:
            raise PngDecodeError(f"Malformed PNG chunk stream: {e}", path) from e

        return b"".join(parts)

    @staticmethod
    def encode_payload(text: str) -> str:
        """base64 of the UTF-8 text."""
        return base64.b64encode(text.encode("utf-8")).decode("ascii")

    @staticmethod
    def decode_payload(payload: str) -> str:
        """
        Decode a base64 payload back to text.

        Raises:
            Base64DecodeError: Not valid base64
            Utf8DecodeError: Decoded bytes are not UTF-8
        """
        cleaned = "".join(payload.split())
        # Some producers drop the trailing padding
        cleaned += "=" * (-len(cleaned) % 4)
        try:
            raw = base64.b64decode(cleaned, validate=True)
        except (binascii.Error, ValueError) as e:
            raise Base64DecodeError(f"Error while decoding base64 character data from character card: {e}") from e

        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise Utf8DecodeError(f"Error while parsing decoded base64 bytes to utf8 string: {e}") from e

    @staticmethod
    def extract_image(png_path: str) -> bytes:
        """
        Load PNG image data from file.

        Args:
            png_path: Path to PNG file

        Returns:
            PNG file data as bytes
        """
        try:
            with open(png_path, 'rb') as f:
                return f.read()
        except OSError as e:
            logger.error(f"Error reading PNG file '{png_path}': {e}")
            raise

    @staticmethod
    def save_image(png_data: bytes, output_path: str) -> None:
        """
        Save PNG data to file.

        Args:
            png_data: PNG file data as bytes
            output_path: Path to save PNG file
        """
        try:
            with open(output_path, 'wb') as f:
                f.write(png_data)
        except OSError as e:
            logger.error(f"Error saving PNG file to '{output_path}': {e}")
            raise
