[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "motorboard"
version = "0.1.0"
description = "Control-loop, stepper-bus and small-kernel building blocks of a motor controller board as plain Python objects"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "pid",
    "encoder",
    "pwm",
    "can",
    "stepper",
    "scheduler",
    "rtos",
    "embedded",
    "simulation",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Typing :: Typed",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["motorboard"]

[tool.pytest.ini_options]
addopts = "-ra"
