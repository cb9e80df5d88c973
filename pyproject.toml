[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "msfpdb"
version = "0.1.0"
description = "Read-only parser for MSF/PDB program database files and their CodeView streams"
requires-python = ">=3.10"
dependencies = []
keywords = ["pdb", "msf", "codeview", "debug-symbols", "program-database"]
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
    "Topic :: Software Development :: Debuggers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["msfpdb"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
