[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tinysh"
version = "0.1.0"
description = "A small interactive Unix shell with pipelines, history expansion and robust descriptor I/O helpers"
requires-python = ">=3.10"
keywords = ["shell", "pipeline", "history", "command-line", "robust-io"]
classifiers = [
    "Development Status :: 3 - Alpha",
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
    "Topic :: System :: Shells",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tinysh = "tinysh.shell:main"

[tool.hatch.build.targets.wheel]
packages = ["tinysh"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
