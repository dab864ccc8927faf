[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "xostools"
version = "0.1.0"
description = "XFS disk image tools and SPL compiler helpers for the XOS teaching operating system"
requires-python = ">=3.10"
dependencies = []
keywords = ["xfs", "xsm", "spl", "disk image", "assembly", "operating systems", "education"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
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

[tool.setuptools.packages.find]
include = ["xostools*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
