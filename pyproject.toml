[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "astrakit"
version = "0.1.0"
description = "Math helpers, runtime services and a hardware abstraction layer with a Raspberry Pi implementation"
requires-python = ">=3.10"
dependencies = []
keywords = ["embedded", "hal", "gpio", "i2c", "spi", "uart", "raspberry-pi", "runtime", "math"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["astrakit"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
