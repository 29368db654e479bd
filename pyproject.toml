[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ezxtree"
version = "0.1.0"
description = "A small, forgiving XML parser and element tree that writes the tree back out as XML"
requires-python = ">=3.10"
dependencies = []
keywords = ["xml", "parser", "tree", "serialization", "dtd"]
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
    "Topic :: Text Processing :: Markup :: XML",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
ezxtree = "ezxtree.cli:main"
ezxtree-bible-site = "ezxtree.bible_site:main"

[tool.hatch.build.targets.wheel]
packages = ["ezxtree"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
