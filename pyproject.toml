[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tonic"
version = "0.1.0"
description = "HTTP service building blocks: path cleaning, response writing, renderers, request log formatting and trusted-proxy client IP handling"
requires-python = ">=3.10"
keywords = ["http", "web", "render", "json", "templates", "logging", "proxy"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
]
dependencies = [
    "pyyaml",
    "tomli-w",
    "msgpack",
    "jinja2",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["tonic"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
