[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gdtoolkit"
version = "0.1.0"
description = "Service-side building blocks: ordered maps, conversions, per-thread context, request stats and perf counters"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "ordered-map",
    "conversion",
    "thread-local",
    "statistics",
    "perf-counter",
    "utilities",
]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["gdtoolkit"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
