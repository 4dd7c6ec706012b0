[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "iavlkit"
version = "0.1.0"
description = "Building blocks for a versioned AVL+ key-value store: encodings, an LRU node cache, in-memory and prefixed stores, self-flushing batches and export-stream compression."
requires-python = ">=3.10"
keywords = ["iavl", "avl", "key-value", "database", "varint", "lru-cache"]
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
    "Typing :: Typed",
]
dependencies = [
    "sortedcontainers",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["iavlkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
