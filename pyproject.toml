[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tokenjson5"
version = "0.1.2"
description = "Parse JSON5 values from a token stream into plain Python objects."
requires-python = ">=3.10"
dependencies = []
keywords = ["json5", "json", "parser", "tokenizer"]
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
    "Topic :: File Formats :: JSON",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tokenjson5"]

[tool.pytest.ini_options]
addopts = "-ra"
