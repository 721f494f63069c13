[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xfskit"
version = "0.1.0"
description = "Tools for the XFS disk image of the XSM teaching machine, with the machine's words, memory, registers and disk store"
requires-python = ">=3.10"
dependencies = []
keywords = ["xfs", "xsm", "disk image", "filesystem", "education", "operating systems"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xfs-interface = "xfskit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["xfskit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
