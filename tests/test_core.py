import random
import string

import pytest

from tonic.render.core import (
    Header,
    Recorder,
    Render,
    bytes_to_string,
    string_to_bytes,
    write_content_type,
)


def test_bytes_round_trip_random():
    rng = random.Random(1234)
    for _ in range(100):
        data = bytes(rng.getrandbits(8) for _ in range(1024))
        assert string_to_bytes(bytes_to_string(data)) == data


def test_string_to_bytes_random_letters():
    rng = random.Random(5678)
    for _ in range(100):
        text = "".join(rng.choice(string.ascii_letters) for _ in range(64))
        assert string_to_bytes(text) == text.encode("ascii")


def test_pinned_conversions():
    assert bytes_to_string(b"hello") == "hello"
    assert string_to_bytes("语") == b"\xe8\xaf\xad"


def test_header_canonical_keys():
    header = Header()
    header.set("x-request-id", "abc")
    assert header.get("X-REQUEST-ID") == "abc"
    assert list(header) == ["X-Request-Id"]


def test_header_missing_key():
    header = Header()
    assert header.get("Content-Type") == ""
    assert header.values("Content-Type") == []
    assert "Content-Type" not in header


def test_header_add_and_set():
    header = Header({"accept": "a"})
    header.add("Accept", "b")
    assert header.values("accept") == ["a", "b"]
    header.set("Accept", "c")
    assert header["ACCEPT"] == ["c"]


def test_write_content_type_sets_when_missing():
    recorder = Recorder()
    write_content_type(recorder, ["text/plain"])
    assert recorder.header.get("Content-Type") == "text/plain"


def test_write_content_type_keeps_existing():
    recorder = Recorder()
    recorder.header.set("Content-Type", "image/png")
    write_content_type(recorder, "text/plain")
    assert recorder.header.values("Content-Type") == ["image/png"]


def test_recorder_write_sets_ok_status():
    recorder = Recorder()
    assert recorder.write(b"hi") == 2
    assert recorder.code == 200
    assert recorder.text == "hi"


def test_recorder_first_status_wins():
    recorder = Recorder()
    recorder.write_header(404)
    recorder.write_header(500)
    assert recorder.code == 404


def test_render_is_abstract():
    with pytest.raises(TypeError):
        Render()


def test_render_subclass_renders():
    class Plain(Render):
        def render(self, writer):
            self.write_content_type(writer)
            writer.write(b"ok")

        def write_content_type(self, writer):
            write_content_type(writer, "text/plain")

    recorder = Recorder()
    Plain().render(recorder)
    assert recorder.text == "ok"
    assert recorder.header.get("Content-Type") == "text/plain"