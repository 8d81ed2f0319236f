# tonic

Building blocks for HTTP services: canonical URL path cleaning, a global run
mode, static file systems, a status-tracking response writer, response
renderers (JSON, HTML, XML, YAML, TOML, MessagePack, Protocol Buffers, plain
text, raw data, streams and redirects), request log formatting with ANSI
colours, trusted-proxy aware client IP resolution and helpers for the router's
automatic redirects.

## Installation

```
pip install tonic
```

To run the test suite:

```
pip install "tonic[test]"
pytest
```

## Path cleaning

```python
from tonic.pathclean import clean_path

clean_path("/abc/def/../ghi/../jkl")   # "/abc/jkl"
clean_path("abc//./../def")            # "/def"
clean_path("")                         # "/"
```

## Run mode

The mode is read from the `TONIC_MODE` environment variable when `tonic.mode`
is imported; an empty value picks test mode under pytest and debug mode
otherwise. It can be changed later:

```python
from tonic.mode import Mode, is_debugging, mode, set_mode

set_mode(Mode.RELEASE)
assert mode() == "release"
assert not is_debugging()
```

An unknown mode name raises `ValueError`.

## File systems

`tonic.fs.directory(root, list_directory)` returns a `DirFS` rooted at `root`
(paths are cleaned, so `..` never leaves the root). With `list_directory`
false it is wrapped in `OnlyFilesFS`, whose opened files are
`NeutralizedReaddirFile` objects: `readdir()` always returns an empty list.
`FSAdapter` exposes any object with an `open(name)` method as a file system.

## Rendering responses

Every renderer has `render(writer)` and `write_content_type(writer)`. A writer
is any object with a `header` (a `tonic.render.core.Header`) and a
`write(data)` method; `tonic.render.core.Recorder` is an in-memory writer that
records the status code, headers and body.

```python
from tonic.render.core import Recorder
from tonic.render.json_render import JSON, SecureJSON

w = Recorder()
JSON({"foo": "bar", "html": "<b>"}).render(w)
w.text                          # '{"foo":"bar","html":"\\u003cb\\u003e"}'
w.header.get("Content-Type")    # 'application/json; charset=utf-8'

w = Recorder()
SecureJSON("while(1);", [{"foo": "bar"}]).render(w)
w.text                          # 'while(1);[{"foo":"bar"}]'
```

The renderers:

- `tonic.render.json_render`: `JSON`, `IndentedJSON`, `SecureJSON`,
  `JsonpJSON`, `AsciiJSON`, `PureJSON`, plus `marshal`, `marshal_indent`,
  `js_escape_string` and `write_json`. Keys are sorted and unsupported values
  raise `TypeError` or `ValueError`.
- `tonic.render.basic`: `Data`, `String` (printf-style verbs such as `%s`,
  `%d` and `%v`; with no arguments the format is written as is), `Reader`
  (a stream, with optional `content_length` and extra headers) and `Redirect`
  (raises `ValueError` for a status outside 300–308 other than 201).
- `tonic.render.html_render`: `HTMLProduction`, `HTMLDebug` and `HTML`,
  backed by Jinja2 templates with configurable `Delims`; `load_templates`
  reads templates from files, a glob pattern, or a file system with patterns.
  `HTMLDebug` reloads the templates on every `instance()` call.
- `tonic.render.serial`: `MsgPack`, `ProtoBuf` (any object with
  `SerializeToString()`), `TOML` (mappings only), `XML` (an `Element`, an
  object with `to_xml()`, or a scalar) and `YAML`.

A renderer sets `Content-Type` only when the writer has none yet.

## Response writer

`tonic.response_writer.ResponseWriter` wraps another writer, holds back the
status code until the first write and counts the bytes written:

```python
from tonic.render.core import Recorder
from tonic.response_writer import ResponseWriter

rw = ResponseWriter(Recorder())
rw.write_header(300)
rw.written          # False
rw.write(b"hola")
rw.size             # 4
rw.status           # 300
```

Once written, later status changes are ignored. `flush`, `hijack` and
`close_notify` raise `TypeError` if the underlying writer lacks them;
`pusher()` returns the underlying writer if it has `push`, else `None`.

## Request log formatting

```python
from datetime import datetime, timedelta
from tonic.logger import LogFormatterParams, default_log_formatter

line = default_log_formatter(LogFormatterParams(
    timestamp=datetime(2018, 12, 7, 9, 11, 42),
    status_code=200,
    latency=timedelta(seconds=5),
    client_ip="20.20.20.20",
    method="GET",
    path="/",
))
# '[TONIC] 2018/12/07 - 09:11:42 | 200 |            5s |     20.20.20.20 | GET      "/"\n'
```

Colours follow the console colour mode: `disable_console_color()`,
`force_console_color()`, `set_console_color_mode()` and
`console_color_mode()`; in `ColorMode.AUTO` colours appear only when
`is_term` is set. `format_duration` formats durations such as `1.5ms` or
`2h3m4.5s`.

## Client IP and trusted proxies

```python
from tonic.clientip import TrustedProxies

proxies = TrustedProxies()          # trusts every address by default
proxies.is_unsafe()                 # True
proxies.set(["192.168.0.0/16", "172.16.0.1"])
proxies.validate_header("20.20.20.20, 192.168.1.5")   # "20.20.20.20"
```

An invalid address or network raises `TrustedProxyError` (a `ValueError`);
the networks parsed before it stay in effect. `set(None)` disables proxy
trust entirely. `parse_ip` and `prepare_trusted_cidrs` are available on
their own.

## Redirect helpers

```python
from tonic.redirects import redirect_status, trailing_slash_target

trailing_slash_target("/foo", "")    # "/foo/"
trailing_slash_target("/foo/", "")   # "/foo"
redirect_status("GET")               # 301
redirect_status("POST")              # 307
```

## What it does not do

tonic has no router, no request context and no server: it does not listen
for connections or dispatch requests to handlers, and there is no logging or
panic-recovery middleware. The pieces above are meant to be wired into a
server of your choice.