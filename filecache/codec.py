import json
import pickle
from typing import Literal, Protocol

CodecName = Literal["pickle", "json"]


class Codec(Protocol):
    name: str

    def serialize(self, value) -> bytes: ...

    def deserialize(self, data: bytes): ...


class PickleCodec:
    """Any picklable value. Only read payloads written by trusted processes."""

    name = "pickle"

    def serialize(self, value) -> bytes:
        return pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL)

    def deserialize(self, data: bytes):
        return pickle.loads(data)


class JsonCodec:
    name = "json"

    def serialize(self, value) -> bytes:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":")).encode("utf-8")

    def deserialize(self, data: bytes):
        return json.loads(data.decode("utf-8"))


CODECS = {
    "pickle": PickleCodec,
    "json": JsonCodec,
}


def codec_for(name: CodecName) -> Codec:
    try:
        return CODECS[name]()
    except KeyError:
        raise ValueError(f"Unsupported codec: {name}") from None
