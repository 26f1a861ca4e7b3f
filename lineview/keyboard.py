"""Keyboard input decoding from a raw byte stream."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)

ESC = 0x1b


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    CTRL = "ctrl"
    SPECIAL = "special"


@dataclass
class KeyEvent:
    """Represents a decoded keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'q', 'left', 'escape')
    raw: bytes  # The bytes consumed to produce this event
    code: Optional[int] = None


class ByteReader(Protocol):
    def read_byte(self) -> Optional[int]: ...


class DecoderState(Enum):
    START = "start"
    ESCAPE1 = "escape1"  # Seen ESC
    ESCAPE2 = "escape2"  # Seen ESC + introducer
    ESCAPE3 = "escape3"  # Seen ESC [ digit


# Bytes following ESC, mapped to the key they complete.
ESCAPE_SEQUENCES: Dict[bytes, str] = {
    b"[A": "up",
    b"[B": "down",
    b"[C": "right",
    b"[D": "left",
    b"[H": "home",
    b"[F": "end",
    b"OH": "home",
    b"OF": "end",
    b"[1~": "home",
    b"[7~": "home",
    b"[3~": "delete",
    b"[4~": "end",
    b"[8~": "end",
    b"[5~": "page_up",
    b"[6~": "page_down",
}

INTRODUCERS = b"[O"


def _byte_event(byte: int) -> KeyEvent:
    raw = bytes([byte])
    if 1 <= byte <= 26:
        return KeyEvent(KeyType.CTRL, chr(ord('a') + byte - 1), raw, code=byte)
    return KeyEvent(KeyType.REGULAR, raw.decode('latin-1'), raw, code=byte)


def _escape_event(raw: bytes) -> KeyEvent:
    return KeyEvent(KeyType.SPECIAL, 'escape', raw, code=ESC)


class KeyDecoder:
    """Turns a blocking byte stream into one KeyEvent per call.

    A read that times out in the middle of an escape sequence resolves to
    a bare escape rather than waiting for the rest of the sequence.
    """

    def __init__(self, reader: ByteReader):
        self.reader = reader

    def read_key(self) -> KeyEvent:
        state = DecoderState.START
        seq = bytearray()
        while True:
            byte = self.reader.read_byte()
            if state is DecoderState.START:
                if byte is None:
                    continue
                if byte != ESC:
                    return _byte_event(byte)
                state = DecoderState.ESCAPE1
                continue

            if byte is None:
                return _escape_event(b"\x1b" + bytes(seq))
            seq.append(byte)

            if state is DecoderState.ESCAPE1:
                if byte not in INTRODUCERS:
                    return _escape_event(b"\x1b" + bytes(seq))
                state = DecoderState.ESCAPE2
            elif state is DecoderState.ESCAPE2 and seq[0] == ord('[') and ord('0') <= byte <= ord('9'):
                state = DecoderState.ESCAPE3
            else:
                return self._complete(bytes(seq))

    def _complete(self, seq: bytes) -> KeyEvent:
        raw = b"\x1b" + seq
        value = ESCAPE_SEQUENCES.get(seq)
        if value is None:
            logger.debug("unrecognized escape sequence %r", raw)
            return _escape_event(raw)
        return KeyEvent(KeyType.SPECIAL, value, raw)


def describe(event: KeyEvent) -> str:
    """Human-readable name for an event."""
    if event.key_type == KeyType.CTRL:
        return f"Ctrl-{event.value.upper()}"
    if event.key_type == KeyType.SPECIAL:
        return event.value
    if event.code is not None and not 32 <= event.code < 127:
        return f"0x{event.code:02x}"
    return repr(event.value)
