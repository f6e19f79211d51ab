[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "humakit"
version = "0.1.0"
description = "Building blocks for HTTP APIs: body formats, middleware chains, conditional requests, cookies, casing helpers and a small router."
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "api", "router", "middleware", "openapi", "conditional-requests", "cookies", "casing"]
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
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["humakit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
