import io
from typing import Callable, IO, Any

utf8_bom = b"\xef\xbb\xbf"

def strip_utf8_bom(data: bytes) -> bytes:
    # removes the utf-8 byte order mark from byte data if present.
    if data.startswith(utf8_bom):
        return data[len(utf8_bom):]
    return data

def is_binary_sink(sink: IO[Any]) -> bool:
    # binary streams take bytes; everything else is treated as a text sink.
    return isinstance(sink, (io.RawIOBase, io.BufferedIOBase))

def sink_writer(sink: IO[Any], encoding: str = "utf-8") -> Callable[[str], None]:
    # returns a write(str) callable for either a text or a binary sink.
    if is_binary_sink(sink):
        return lambda chunk: sink.write(chunk.encode(encoding))
    return sink.write
