[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "daisyplay"
version = "0.1.0"
description = "Building blocks for playing DAISY talking books and Audio-CDs"
requires-python = ">=3.10"
dependencies = []
keywords = ["daisy", "audiobook", "talking book", "audio-cd", "accessibility", "smil"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Adaptive Technologies",
    "Topic :: Multimedia :: Sound/Audio :: Players",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["daisyplay"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
