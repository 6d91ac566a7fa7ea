[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "delimread"
version = "0.1.0"
description = "Configurable delimited-text (CSV) reading with byte and text records, positions, seeking and header-aware value serialization."
requires-python = ">=3.10"
dependencies = []
keywords = ["csv", "delimited", "parser", "records", "tsv"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: General",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["delimread"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
