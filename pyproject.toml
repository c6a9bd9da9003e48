[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mbrtu"
version = "0.1.0"
description = "Modbus RTU framing, device commands and simulated serial slaves for temperature, relay, power and voltage boards"
requires-python = ">=3.10"
dependencies = [
    "pyserial",
]
keywords = ["modbus", "rtu", "serial", "rs485", "crc", "mock"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Manufacturing",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
    "Topic :: Terminals :: Serial",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
mbrtu-mock = "mbrtu.mock_server:main"
mbrtu-read = "mbrtu.reader:main"

[tool.hatch.build.targets.wheel]
packages = ["mbrtu"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
