[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gofetch"
version = "0.1.0"
description = "A small wget-style downloader with rate limiting, URL lists, page mirroring and a web front end"
requires-python = ">=3.10"
keywords = ["wget", "download", "mirror", "http", "rate-limit"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: Web Environment",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Utilities",
]
dependencies = [
    "requests",
    "beautifulsoup4",
    "tqdm",
    "flask",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
gofetch = "gofetch.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gofetch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
