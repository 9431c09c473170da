[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "siojson"
version = "0.1.0"
description = "JSON value and object model with binary support, dataclass conversion and simple JSON-over-HTTP requests"
requires-python = ">=3.10"
dependencies = []
keywords = ["json", "binary", "serialization", "dataclass", "http", "base64"]
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
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["siojson"]

[tool.pytest.ini_options]
addopts = "-ra"
