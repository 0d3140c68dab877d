[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nanofmt"
version = "0.5.5"
description = "A small, configurable printf-style formatter with C printf semantics."
requires-python = ">=3.10"
dependencies = []
keywords = ["printf", "snprintf", "format", "string-formatting", "embedded"]
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
    "Topic :: Software Development :: Libraries",
    "Topic :: Text Processing :: General",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nanofmt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
