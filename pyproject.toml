[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nodorf"
version = "0.1.0"
description = "Decoders and encoders for 433 MHz home-automation radio protocols and common sensor data formats"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "home-automation",
    "rf",
    "433mhz",
    "klik-aan-klik-uit",
    "homeeasy",
    "alecto",
    "oregon",
    "opentherm",
    "sensors",
]
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
    "Topic :: Home Automation",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nodorf"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
