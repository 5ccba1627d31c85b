[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sibridge"
version = "0.1.0"
description = "Result models, WebKit inspector RPC handling and developer-disk-image helpers for iOS device tooling"
requires-python = ">=3.10"
dependencies = []
keywords = ["ios", "webinspector", "webkit", "devtools", "device", "testing"]
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
    "Topic :: Software Development :: Testing",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sibridge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
