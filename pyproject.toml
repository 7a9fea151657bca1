[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "serialterm"
version = "0.1.0"
description = "A small serial port terminal: open a port, send text, hex or binary payloads, and log what comes back."
requires-python = ">=3.10"
dependencies = [
    "pyserial",
]
keywords = ["serial", "uart", "terminal", "rs232", "com port", "hex", "ring buffer"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals :: Serial",
    "Topic :: Communications",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
serialterm = "serialterm.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["serialterm"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
