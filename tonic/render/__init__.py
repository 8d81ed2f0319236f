"""Response renderers: JSON, HTML, XML, YAML, TOML, MessagePack, Protocol Buffers, text, data, streams and redirects."""