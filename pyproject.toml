[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "moonlib"
version = "0.1.0"
description = "Pieces of a small scripting-language runtime: bytecode encoding, value helpers, and math, os and package libraries"
requires-python = ">=3.10"
dependencies = []
keywords = ["interpreter", "bytecode", "virtual machine", "scripting", "runtime"]
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
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["moonlib"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
