[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bigview"
version = "0.1.0"
description = "Terminal viewer for very large text files"
requires-python = ">=3.10"
dependencies = []
keywords = ["viewer", "pager", "terminal", "large files", "curses", "json", "xml"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console :: Curses",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: General",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
bigview = "bigview.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["bigview"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
