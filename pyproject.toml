[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "topgraph"
version = "4.0.0"
description = "Building blocks for a terminal activity monitor: system data sources, a layout language, braille graphs and widgets drawn on a character-cell buffer"
requires-python = ">=3.10"
keywords = [
    "monitor",
    "top",
    "terminal",
    "system",
    "cpu",
    "memory",
    "processes",
    "braille",
    "graph",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "psutil",
    "wcwidth",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["topgraph"]

[tool.hatch.build.targets.sdist]
include = ["topgraph", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
