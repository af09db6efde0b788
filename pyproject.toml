[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jiafile"
version = "0.1.0"
description = "A small HTTP file-management server with JSON replies for listing, creating, moving, copying and deleting files."
requires-python = ">=3.10"
keywords = ["file-server", "http", "wsgi", "file-management", "json-api"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: System :: Filesystems",
]
dependencies = [
    "werkzeug>=2.3",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
jiafile = "jiafile.server:main"

[tool.hatch.build.targets.wheel]
packages = ["jiafile"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
