[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "netpipe"
version = "0.1.0"
description = "A bounded byte stream, a socket-to-terminal relay, and small TCP and HTTP command-line tools"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "socket", "byte stream", "netcat", "http", "networking"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
netpipe-webget = "netpipe.webget:main"
netpipe-tcp-native = "netpipe.tcp_native:main"

[tool.hatch.build.targets.wheel]
packages = ["netpipe"]

[tool.hatch.build.targets.sdist]
include = ["netpipe", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
strict = true
