[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "litepage"
version = "0.1.0"
description = "Read-only access to SQLite database files: header, pages, records, schema and B-tree scans"
requires-python = ">=3.10"
dependencies = []
keywords = ["sqlite", "database", "b-tree", "file-format", "reader"]
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
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["litepage"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
